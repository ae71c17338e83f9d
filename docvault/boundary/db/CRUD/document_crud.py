"""
Document CRUD operations.

Provides Create, Read, Update and soft-delete operations for DocumentModel
with document-specific listing filters and revision handling.

Dependencies: sqlalchemy, docvault.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db.CRUD.base_crud import BaseCRUD
from docvault.boundary.db.models.document_model import DocumentModel
from docvault.models.common import SortOrder
from docvault.models.document import DocumentListFilters
from docvault.models.user import UserDocumentsQuery

OWNER_DOCUMENT_FIELDS = (
    "id",
    "title",
    "description",
    "original_filename",
    "mime_type",
    "size",
    "created_at",
)


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with revision-aware updates and filtered listings.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def update_document(
        self,
        session: AsyncSession,
        id: UUID,
        values: dict[str, Any],
        expected_version: int | None = None,
    ) -> int:
        """
        Write merged metadata to a live document and bump its revision.

        Args:
            session: Async database session
            id: Document UUID
            values: Column values to write
            expected_version: When given, only update if version still matches

        Returns:
            int: Rows affected (0 when missing, deleted, or revision moved on)
        """
        predicates: list[ColumnElement[bool]] = [
            DocumentModel.id == id,
            *self.deleted_predicates(),
        ]
        if expected_version is not None:
            predicates.append(DocumentModel.version == expected_version)

        return await self.update_where(
            session,
            predicates,
            {**values, "version": DocumentModel.version + 1},
        )

    def filter_predicates(self, filters: DocumentListFilters) -> list[ColumnElement[bool]]:
        """
        Translate listing filters into WHERE clauses.

        Args:
            filters: Document listing filters

        Returns:
            list: Predicates to AND together
        """
        predicates = self.deleted_predicates(filters.include_deleted, filters.only_deleted)
        if filters.title:
            predicates.append(DocumentModel.title.ilike(f"%{filters.title}%"))
        if filters.mime_type:
            predicates.append(DocumentModel.mime_type.ilike(f"%{filters.mime_type}%"))
        if filters.owner_id:
            predicates.append(DocumentModel.owner_id == filters.owner_id)
        return predicates

    async def list_filtered(
        self,
        session: AsyncSession,
        filters: DocumentListFilters,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Retrieve one page of projected documents and the filter's total count.

        Args:
            session: Async database session
            filters: Filters, projection, pagination and sort order

        Returns:
            tuple: (projected rows, total count)
        """
        order_by = (
            DocumentModel.updated_at.asc()
            if filters.sort_order == SortOrder.ASC
            else DocumentModel.updated_at.desc()
        )
        return await self.paginate(
            session,
            self.filter_predicates(filters),
            filters.select,
            order_by,
            filters.offset,
            filters.limit,
        )

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner_id: UUID,
        query: UserDocumentsQuery,
        include_file_path: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Retrieve one page of an owner's live documents, newest first by default.

        Args:
            session: Async database session
            owner_id: Owning user
            query: Pagination and sort order (applied to created_at)
            include_file_path: Also project the storage-relative path

        Returns:
            tuple: (projected rows, total count)
        """
        fields: list[str] = [*OWNER_DOCUMENT_FIELDS]
        if include_file_path:
            fields.append("file_path")
        order_by = (
            DocumentModel.created_at.asc()
            if query.sort_order == SortOrder.ASC
            else DocumentModel.created_at.desc()
        )
        return await self.paginate(
            session,
            [DocumentModel.owner_id == owner_id, *self.deleted_predicates()],
            fields,
            order_by,
            query.offset,
            query.limit,
        )


document_crud = DocumentCRUD()
