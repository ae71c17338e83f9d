"""
Database boundary layer: ORM models and connection management.

CRUD classes live in docvault.boundary.db.CRUD.

Exports:
  - Base, UUIDMixin, TimestampMixin, SoftDeleteMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - UserModel, DocumentModel, IngestionModel, IngestionStatus: Core domain entities

Dependencies: sqlalchemy, docvault.configs
System role: Metadata store adapter for users, documents and ingestions
"""

from docvault.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin
from docvault.boundary.db.connection import (
    create_engine_from_settings,
    create_session_factory,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docvault.boundary.db.models import DocumentModel, IngestionModel, IngestionStatus, UserModel

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "SoftDeleteMixin",
    # Connection
    "create_engine_from_settings",
    "create_session_factory",
    "get_async_engine",
    "get_async_session_factory",
    "get_async_db",
    # Models
    "DocumentModel",
    "IngestionModel",
    "IngestionStatus",
    "UserModel",
]
