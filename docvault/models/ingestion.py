"""
Ingestion domain models and schemas.

Request/response schemas and listing filters for ingestion tracking.

Dependencies: pydantic
System role: Ingestion status API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from docvault.boundary.db.models.ingestion_model import IngestionStatus
from docvault.models.common import ListQuery

IngestionField = Literal[
    "id",
    "status",
    "logs",
    "error_message",
    "document_id",
    "user_id",
    "finished_at",
    "created_at",
    "updated_at",
    "deleted_at",
]

DEFAULT_INGESTION_FIELDS: list[IngestionField] = [
    "id",
    "status",
    "logs",
    "error_message",
    "document_id",
    "user_id",
    "created_at",
    "updated_at",
]


class IngestionListFilters(ListQuery):
    """Filters, projection and pagination for ingestion listings."""

    select: list[IngestionField] = Field(
        default_factory=lambda: list(DEFAULT_INGESTION_FIELDS), min_length=1
    )
    id: uuid.UUID | None = None
    document_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    status: list[IngestionStatus] | None = None
    has_logs: bool | None = None
    has_error: bool | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None


class IngestionResponse(BaseModel):
    """Ingestion details returned to pollers."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    document_id: uuid.UUID
    user_id: uuid.UUID
    status: IngestionStatus
    logs: str
    error_message: str | None = None
    finished_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TriggerIngestionResult(BaseModel):
    """Returned by trigger before any background work has run."""

    ingestion_id: uuid.UUID
    document_id: uuid.UUID
    message: str
