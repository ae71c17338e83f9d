"""Service orchestrators."""

from .document_service import DocumentService
from .ingestion_service import AdvanceOptions, IngestionService
from .user_service import UserService

__all__ = [
    "AdvanceOptions",
    "DocumentService",
    "IngestionService",
    "UserService",
]
