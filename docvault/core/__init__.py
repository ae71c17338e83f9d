"""
Core business logic module.

Contains the exception hierarchy, authorization rules, error translation,
the metadata/blob consistency policy and the ingestion scheduler.
"""

from docvault.core.exceptions import (
    ConflictError,
    DocVaultException,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from docvault.core.authorization import UserRole, ensure_allowed, has_role, is_allowed
from docvault.core.scheduler import DeadLetter, IngestionScheduler

__all__ = [
    # Exceptions
    "DocVaultException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "InternalError",
    # Authorization
    "UserRole",
    "is_allowed",
    "ensure_allowed",
    "has_role",
    # Scheduling
    "IngestionScheduler",
    "DeadLetter",
]
