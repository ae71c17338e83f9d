"""
Document domain models and schemas.

Request/response schemas and listing filters for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Literal

from pydantic import BaseModel, ConfigDict, Field

from docvault.models.common import ListQuery

DocumentField = Literal[
    "id",
    "owner_id",
    "title",
    "description",
    "original_filename",
    "file_path",
    "mime_type",
    "size",
    "version",
    "created_at",
    "updated_at",
    "deleted_at",
]

DEFAULT_DOCUMENT_FIELDS: list[DocumentField] = [
    "id",
    "title",
    "description",
    "original_filename",
    "mime_type",
    "size",
]


class DocumentMetadata(BaseModel):
    """Caller-supplied metadata for a new document."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None


class DocumentChanges(BaseModel):
    """Partial metadata update; None means "leave unchanged", "" clears the description."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None

    def is_empty(self) -> bool:
        return self.title is None and self.description is None


class UploadedBlob(BaseModel):
    """A file already written to storage, described by its absolute location."""

    absolute_path: str
    original_filename: str
    mime_type: str
    size: int = Field(ge=0)


class DocumentListFilters(ListQuery):
    """Filters, projection and pagination for document listings."""

    select: list[DocumentField] = Field(
        default_factory=lambda: list(DEFAULT_DOCUMENT_FIELDS), min_length=1
    )
    title: str | None = Field(default=None, description="Case-insensitive title substring")
    mime_type: str | None = Field(default=None, description="Case-insensitive MIME substring")
    owner_id: uuid.UUID | None = None


class DocumentResponse(BaseModel):
    """Document details returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str | None = None
    original_filename: str
    mime_type: str
    size: int
    version: int
    created_at: datetime
    updated_at: datetime


class CreateDocumentResponse(BaseModel):
    """Response schema for a completed upload."""

    message: str = "Document successfully uploaded"
    id: uuid.UUID


@dataclass
class DownloadResult:
    """Open byte stream over a document blob plus response metadata."""

    stream: BinaryIO
    mime_type: str
    filename: str
