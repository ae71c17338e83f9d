"""
Document service orchestrator.

Keeps a document's metadata record and its blob on disk consistent across
create, update, soft delete and download. Metadata writes and blob cleanups
run concurrently; the metadata outcome decides the result.

Dependencies: docvault.boundary.db, docvault.boundary.storage, docvault.core
System role: Document management orchestration
"""

import logging
import os
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db.CRUD.document_crud import document_crud
from docvault.boundary.db.models.document_model import DocumentModel
from docvault.boundary.storage.local_storage import LocalStorage
from docvault.core.consistency import cleanup_blob_after, settle_metadata_and_blob
from docvault.core.error_mapping import translate_errors
from docvault.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from docvault.models.common import PaginatedResult
from docvault.models.document import (
    DocumentChanges,
    DocumentListFilters,
    DocumentMetadata,
    DownloadResult,
    UploadedBlob,
)
from docvault.models.user import UserDocumentsQuery
from docvault.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


def _missing_file(document_id: UUID) -> NotFoundError:
    return NotFoundError(
        "File does not exist on server", resource="file", resource_id=str(document_id)
    )


class DocumentService:
    """
    Document service orchestrator.

    Owns the document metadata record and coordinates it with LocalStorage.
    Ownership checks happen before these methods are called.
    """

    def __init__(self, db: AsyncSession, storage: LocalStorage) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            storage: Blob storage adapter
        """
        self.db = db
        self.storage = storage

    @translate_errors("create_document", "Failed to create document")
    async def create(
        self,
        owner_id: UUID,
        metadata: DocumentMetadata,
        blob: UploadedBlob,
    ) -> UUID:
        """
        Persist the metadata record for an already-written blob.

        Args:
            owner_id: Uploading user
            metadata: Title and optional description
            blob: Written blob (absolute path, original name, MIME type, size)

        Returns:
            UUID: New document id

        Raises:
            ConflictError: Insert violated a uniqueness constraint
            InternalError: Insert did not produce an id
        """
        try:
            document = await document_crud.create(
                self.db,
                owner_id=owner_id,
                title=metadata.title,
                description=metadata.description,
                original_filename=blob.original_filename,
                file_path=self.storage.to_relative(blob.absolute_path),
                mime_type=blob.mime_type,
                size=blob.size,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                "Document already exists", details={"owner_id": str(owner_id)}
            ) from e
        if document.id is None:
            raise InternalError("Failed to create document")
        await self.db.commit()

        log_with_context(
            logger,
            logging.INFO,
            "Document created",
            document_id=document.id,
            owner_id=owner_id,
            file_path=document.file_path,
        )
        return document.id

    @translate_errors("find_document", "Failed to fetch document")
    async def find_by(
        self,
        include_deleted: bool = False,
        **conditions: Any,
    ) -> DocumentModel | None:
        """
        Look up a single document by column equality.

        Args:
            include_deleted: Also match soft-deleted documents
            **conditions: column_name=value pairs

        Returns:
            DocumentModel or None
        """
        document = await document_crud.find_one(
            self.db, include_deleted=include_deleted, **conditions
        )
        if document is None and set(conditions) == {"id"}:
            logger.warning(
                "Document not found",
                extra={"document_id": str(conditions["id"])},
            )
        return document

    @translate_errors("get_document", "Failed to fetch document")
    async def get_details(self, document_id: UUID) -> DocumentModel:
        """
        Get a live document.

        Raises:
            NotFoundError: Document missing or soft-deleted
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise NotFoundError(
                "Document not found", resource="document", resource_id=str(document_id)
            )
        return document

    @translate_errors("update_document", "Failed to update document metadata")
    async def update(
        self,
        document_id: UUID,
        changes: DocumentChanges,
        current: DocumentModel,
        new_blob: UploadedBlob | None = None,
        expected_version: int | None = None,
    ) -> str:
        """
        Merge metadata changes and an optional replacement blob into a document.

        The replaced blob is deleted concurrently with the metadata write; a
        failure to delete it is logged and does not fail the update. With
        expected_version the write goes first and the replaced blob is only
        deleted once the write has matched.

        Args:
            document_id: Document to update
            changes: New title and/or description
            current: The document as read for the ownership check
            new_blob: Replacement file, already written
            expected_version: Only write if the stored version still matches

        Returns:
            str: Success message

        Raises:
            ValidationError: Nothing to update
            NotFoundError: Document missing or soft-deleted
            ConflictError: Stored version differs from expected_version
        """
        if changes.is_empty() and new_blob is None:
            raise ValidationError("No update data provided")

        values: dict[str, Any] = {
            "title": changes.title if changes.title is not None else current.title,
            "description": (
                changes.description if changes.description is not None else current.description
            ),
        }

        obsolete_path = None
        if new_blob is not None:
            new_path = self.storage.to_relative(new_blob.absolute_path)
            values.update(
                file_path=new_path,
                original_filename=new_blob.original_filename,
                mime_type=new_blob.mime_type,
                size=new_blob.size,
            )
            if current.file_path and current.file_path != new_path:
                obsolete_path = current.file_path

        metadata_write = document_crud.update_document(
            self.db, document_id, values, expected_version
        )
        if expected_version is None:
            rowcount = await settle_metadata_and_blob(
                metadata_write,
                self.storage.delete(obsolete_path) if obsolete_path else None,
                document_id=document_id,
                file_path=obsolete_path,
            )
        else:
            # A stale version must leave the live blob in place
            rowcount = await metadata_write
            if rowcount and obsolete_path:
                await cleanup_blob_after(
                    self.storage.delete(obsolete_path),
                    document_id=document_id,
                    file_path=obsolete_path,
                )

        if rowcount == 0:
            await self.db.rollback()
            if expected_version is not None and await document_crud.get_by_id(self.db, document_id):
                raise ConflictError(
                    "Document was modified concurrently",
                    details={"document_id": str(document_id), "expected_version": expected_version},
                )
            raise NotFoundError(
                "Document not found", resource="document", resource_id=str(document_id)
            )

        await self.db.commit()
        log_with_context(
            logger,
            logging.INFO,
            "Document updated",
            document_id=document_id,
            replaced_blob=new_blob is not None,
        )
        return "Document Updated Successfully"

    @translate_errors("delete_document", "Failed to delete document")
    async def soft_delete(self, document: DocumentModel, delete_blob: bool = True) -> str:
        """
        Soft-delete a document and best-effort delete its blob.

        A missing blob is success; any other blob failure is only logged.

        Args:
            document: Live document to delete
            delete_blob: Also remove the file from storage

        Returns:
            str: Success message

        Raises:
            InternalError: The metadata write failed or touched no row
        """
        rowcount = await settle_metadata_and_blob(
            document_crud.soft_delete_by_id(self.db, document.id),
            self.storage.delete(document.file_path) if delete_blob else None,
            document_id=document.id,
            file_path=document.file_path,
        )
        if rowcount == 0:
            await self.db.rollback()
            raise InternalError(
                "Failed to delete document", details={"document_id": str(document.id)}
            )

        await self.db.commit()
        log_with_context(
            logger,
            logging.INFO,
            "Document soft-deleted",
            document_id=document.id,
            blob_deleted=delete_blob,
        )
        return f"Document {document.id} deleted successfully"

    @translate_errors("download_document", "Failed to download document")
    async def download(self, document_id: UUID) -> DownloadResult:
        """
        Open a live document's blob for streaming.

        Returns:
            DownloadResult: Open stream, MIME type and "<title><ext>" filename

        Raises:
            NotFoundError: Document missing, soft-deleted, or blob absent
        """
        document = await self.get_details(document_id)

        if not await self.storage.exists(document.file_path):
            raise _missing_file(document_id)
        try:
            stream = await self.storage.open_read(document.file_path)
        except FileNotFoundError as e:
            # Removed by a concurrent update or delete after the existence check
            raise _missing_file(document_id) from e
        _, extension = os.path.splitext(document.file_path)
        return DownloadResult(
            stream=stream,
            mime_type=document.mime_type,
            filename=f"{document.title}{extension}",
        )

    @translate_errors("list_documents", "Failed to fetch documents")
    async def list_filtered(self, filters: DocumentListFilters) -> PaginatedResult[dict]:
        """
        List documents matching filters with projection and pagination.

        Args:
            filters: Title/MIME/owner filters, soft-delete inclusion, select, page

        Returns:
            PaginatedResult: Projected rows plus total count and pages
        """
        items, total = await document_crud.list_filtered(self.db, filters)
        return PaginatedResult[dict].build(items, total, filters.limit)

    @translate_errors("list_user_documents", "Failed to fetch documents")
    async def get_user_documents(
        self,
        owner_id: UUID,
        query: UserDocumentsQuery,
        include_file_path: bool = False,
    ) -> PaginatedResult[dict]:
        """
        List one user's live documents.

        Args:
            owner_id: Owning user
            query: Page, limit and sort order on created_at
            include_file_path: Expose storage paths (internal callers only)

        Returns:
            PaginatedResult: The owner's documents plus total count and pages
        """
        items, total = await document_crud.list_for_owner(
            self.db, owner_id, query, include_file_path
        )
        return PaginatedResult[dict].build(items, total, query.limit)
