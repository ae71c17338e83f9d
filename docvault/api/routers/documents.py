"""
Document API endpoints.

Routes:
- POST /documents/upload - Upload a file with its metadata
- GET /documents/all - List documents with filters and projection
- GET /documents/{id} - Document details
- GET /documents/{id}/download - Stream the document file
- PATCH /documents/{id}/update - Update metadata and/or replace the file
- DELETE /documents/{id}/delete - Soft-delete a document

Dependencies: docvault.application.services, docvault.models
System role: Document HTTP API
"""

import logging
from typing import Annotated, BinaryIO, Iterator
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from docvault.api.deps import get_document_service, get_storage, require_roles
from docvault.application.services.document_service import DocumentService
from docvault.boundary.storage import LocalStorage
from docvault.core.authorization import UserRole, ensure_allowed
from docvault.core.exceptions import DocVaultException
from docvault.models.auth import Requester
from docvault.models.common import PaginatedResult, SimpleMessageResponse
from docvault.models.document import (
    CreateDocumentResponse,
    DocumentChanges,
    DocumentListFilters,
    DocumentMetadata,
    DocumentResponse,
    UploadedBlob,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

DOWNLOAD_CHUNK_SIZE = 64 * 1024

writers = require_roles(UserRole.ADMIN, UserRole.EDITOR)
readers = require_roles(UserRole.ADMIN, UserRole.EDITOR, UserRole.VIEWER)


async def _discard_blob(storage: LocalStorage, blob: UploadedBlob) -> None:
    """Remove a blob whose metadata write failed."""
    relative_path = storage.to_relative(blob.absolute_path)
    try:
        await storage.delete(relative_path)
    except DocVaultException as e:
        logger.warning(
            "Failed to discard orphaned upload",
            extra={"file_path": relative_path, "error_msg": str(e)},
        )


def _iter_stream(stream: BinaryIO) -> Iterator[bytes]:
    with stream:
        while True:
            chunk = stream.read(DOWNLOAD_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


async def _read_upload(storage: LocalStorage, file: UploadFile) -> bytes:
    """Read an upload body once its reported size is within the limit."""
    storage.check_upload_size(file.size)
    return await file.read()


@router.post(
    "/upload",
    response_model=CreateDocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(default=None),
    requester: Requester = Depends(writers),
    storage: LocalStorage = Depends(get_storage),
    document_service: DocumentService = Depends(get_document_service),
) -> CreateDocumentResponse:
    """
    Upload a document file and record its metadata.

    The file is written under uploads/<owner_id>/ first; if the metadata
    insert then fails the file is removed again.

    Args:
        file: Multipart file (pdf or docx)
        title: Document title
        description: Optional description
        requester: ADMIN or EDITOR caller (becomes the owner)

    Returns:
        CreateDocumentResponse: New document id

    Raises:
        ValidationError (400): Filename, extension or size rejected
        ForbiddenError (403): VIEWER caller
    """
    content = await _read_upload(storage, file)
    blob = await storage.save_upload(
        owner_id=requester.user_id,
        filename=file.filename or "",
        content=content,
        mime_type=file.content_type or "application/octet-stream",
    )
    try:
        document_id = await document_service.create(
            requester.user_id,
            DocumentMetadata(title=title, description=description),
            blob,
        )
    except DocVaultException:
        await _discard_blob(storage, blob)
        raise
    return CreateDocumentResponse(id=document_id)


@router.get("/all", response_model=PaginatedResult[dict])
async def list_documents(
    filters: Annotated[DocumentListFilters, Query()],
    requester: Requester = Depends(readers),
    document_service: DocumentService = Depends(get_document_service),
) -> PaginatedResult[dict]:
    """
    List documents with filtering, projection and pagination.

    Query parameters: page, limit, sort_order, include_deleted, only_deleted,
    select (repeatable), title, mime_type, owner_id.
    """
    return await document_service.list_filtered(filters)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    requester: Requester = Depends(readers),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Get details of a live document."""
    document = await document_service.get_details(document_id)
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}/download")
async def download_document(
    document_id: UUID,
    requester: Requester = Depends(readers),
    document_service: DocumentService = Depends(get_document_service),
) -> StreamingResponse:
    """
    Stream a document file as an attachment named "<title><extension>".

    Raises:
        NotFoundError (404): Document deleted or file missing on disk
    """
    result = await document_service.download(document_id)
    return StreamingResponse(
        _iter_stream(result.stream),
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}",
        },
    )


@router.patch("/{document_id}/update", response_model=SimpleMessageResponse)
async def update_document(
    document_id: UUID,
    title: str | None = Form(default=None, min_length=1, max_length=255),
    description: str | None = Form(default=None),
    clear_description: bool = Form(default=False),
    expected_version: int | None = Form(default=None, ge=1),
    file: UploadFile | None = File(default=None),
    requester: Requester = Depends(writers),
    storage: LocalStorage = Depends(get_storage),
    document_service: DocumentService = Depends(get_document_service),
) -> SimpleMessageResponse:
    """
    Update a document's metadata and optionally replace its file.

    Only the owner or an ADMIN may update. The replaced file is deleted once
    the new one is recorded. Multipart drops empty fields, so an empty
    description is sent as clear_description=true.

    Raises:
        ValidationError (400): No title, description or file supplied
        ForbiddenError (403): Not the owner and not ADMIN
        NotFoundError (404): Document missing or deleted
        ConflictError (409): expected_version is stale
    """
    current = await document_service.get_details(document_id)
    ensure_allowed(requester.user_id, requester.role, current.owner_id)

    changes = DocumentChanges(title=title, description="" if clear_description else description)
    new_blob = None
    if file is not None and file.filename:
        new_blob = await storage.save_upload(
            owner_id=current.owner_id,
            filename=file.filename,
            content=await _read_upload(storage, file),
            mime_type=file.content_type or "application/octet-stream",
        )

    try:
        message = await document_service.update(
            document_id,
            changes,
            current,
            new_blob=new_blob,
            expected_version=expected_version,
        )
    except DocVaultException:
        if new_blob is not None:
            await _discard_blob(storage, new_blob)
        raise
    return SimpleMessageResponse(message=message)


@router.delete("/{document_id}/delete", response_model=SimpleMessageResponse)
async def delete_document(
    document_id: UUID,
    delete_blob: bool = Query(default=True),
    requester: Requester = Depends(writers),
    document_service: DocumentService = Depends(get_document_service),
) -> SimpleMessageResponse:
    """
    Soft-delete a document and remove its file.

    Raises:
        ForbiddenError (403): Not the owner and not ADMIN
        NotFoundError (404): Document missing or already deleted
    """
    document = await document_service.get_details(document_id)
    ensure_allowed(requester.user_id, requester.role, document.owner_id)
    message = await document_service.soft_delete(document, delete_blob=delete_blob)
    return SimpleMessageResponse(message=message)
