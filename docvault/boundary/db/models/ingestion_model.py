"""
Ingestion ORM model.

Tracks the simulated post-upload processing of one document through the
QUEUED → PROCESSING → COMPLETED/FAILED state machine.

Dependencies: sqlalchemy, docvault.boundary.db.base
System role: Ingestion job persistence for status polling
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docvault.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class IngestionStatus(str, enum.Enum):
    """
    Ingestion lifecycle states.

    QUEUED: Record created, background advancement scheduled
    PROCESSING: Simulated processing underway
    COMPLETED: Terminal; processing succeeded
    FAILED: Terminal; error_message holds the reason
    """

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Allowed forward moves; anything else is rejected by the CRUD layer
INGESTION_TRANSITIONS: dict[IngestionStatus, frozenset[IngestionStatus]] = {
    IngestionStatus.QUEUED: frozenset({IngestionStatus.PROCESSING}),
    IngestionStatus.PROCESSING: frozenset(
        {IngestionStatus.COMPLETED, IngestionStatus.FAILED}
    ),
    IngestionStatus.COMPLETED: frozenset(),
    IngestionStatus.FAILED: frozenset(),
}


class IngestionModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Ingestion ORM model.

    Workflow:
        1. Trigger inserts the row with status=QUEUED and an initial log line
        2. Background advancement moves it to PROCESSING
        3. Background advancement moves it to COMPLETED or FAILED, sets finished_at
        4. Clients poll the details endpoint for the latest status

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: User who triggered the ingestion (foreign key to users.id)
        document_id: Target document (foreign key to documents.id)
        status: Current state
        logs: Newline-separated log trail
        error_message: Set iff status is FAILED
        finished_at: Time the terminal state was reached
        created_at / updated_at / deleted_at: Lifecycle timestamps (UTC)
    """

    __tablename__ = "ingestions"
    __table_args__ = (
        Index("idx_ingestions_document_id", "document_id"),
        Index("idx_ingestions_user_id", "user_id"),
        Index("idx_ingestions_status", "status"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id"),
        nullable=False,
    )

    status: Mapped[IngestionStatus] = mapped_column(
        Enum(
            IngestionStatus,
            native_enum=False,
            length=50,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=IngestionStatus.QUEUED,
    )

    logs: Mapped[str] = mapped_column(Text, nullable=False, default="")

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    document = relationship("DocumentModel", back_populates="ingestions")
