"""
Database models package.

Exports:
  - UserModel: User ORM model
  - DocumentModel: Document ORM model
  - IngestionModel, IngestionStatus: Ingestion ORM model and status enum

Dependencies: sqlalchemy, docvault.boundary.db.base
System role: Database model definitions for domain entities
"""

from docvault.boundary.db.models.document_model import DocumentModel
from docvault.boundary.db.models.ingestion_model import (
    INGESTION_TRANSITIONS,
    IngestionModel,
    IngestionStatus,
)
from docvault.boundary.db.models.user_model import UserModel

__all__ = [
    "UserModel",
    "DocumentModel",
    "IngestionModel",
    "IngestionStatus",
    "INGESTION_TRANSITIONS",
]
