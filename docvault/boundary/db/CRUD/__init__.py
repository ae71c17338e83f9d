"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from docvault.boundary.db.CRUD import document_crud, ingestion_crud, user_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from docvault.boundary.db.CRUD.base_crud import BaseCRUD
from docvault.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from docvault.boundary.db.CRUD.ingestion_crud import (
    IngestionCRUD,
    InvalidTransitionError,
    ingestion_crud,
)
from docvault.boundary.db.CRUD.user_crud import UserCRUD, user_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "IngestionCRUD",
    "InvalidTransitionError",
    "ingestion_crud",
    "UserCRUD",
    "user_crud",
]
