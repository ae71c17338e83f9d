"""
Document ORM model.

Represents an uploaded document: metadata plus the storage-relative location
of its file blob.

Dependencies: sqlalchemy, docvault.boundary.db.base
System role: Document persistence
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docvault.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class DocumentModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Document ORM model.

    The metadata row is authoritative for whether a document exists; the blob
    at file_path is authoritative only for whether its bytes can be read.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Owning user (foreign key to users.id)
        title: Display title (255 char limit)
        description: Optional free text
        original_filename: Filename as uploaded by the client
        file_path: Blob location relative to the storage root (never absolute)
        mime_type: MIME type of the currently stored blob
        size: Byte size of the currently stored blob
        version: Revision counter, incremented by every metadata update
        created_at / updated_at / deleted_at: Lifecycle timestamps (UTC)

    Relationships:
        owner: UserModel that uploaded the document
        ingestions: IngestionModel rows targeting this document
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("idx_documents_owner_id", "owner_id"),
        Index("idx_documents_created_at", "created_at"),
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    original_filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    file_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Storage-root-relative blob path",
    )

    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)

    size: Mapped[int] = mapped_column(Integer, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    owner = relationship("UserModel", back_populates="documents")

    ingestions = relationship("IngestionModel", back_populates="document")
