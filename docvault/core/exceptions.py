"""
Exception hierarchy for DocVault.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocVaultException(Exception):
    """Base exception for all DocVault application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocVaultException):
    """Raised when the caller supplied an operation with nothing valid to do."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(DocVaultException):
    """Raised when a document or ingestion does not exist or is soft-deleted."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            message: Error message
            resource: Resource kind ("document", "ingestion", "file")
            resource_id: Identifier that was looked up
            details: Additional context
        """
        details = details or {}
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details)


class UnauthorizedError(DocVaultException):
    """Raised when the requester identity is missing or unusable."""

    pass


class ForbiddenError(DocVaultException):
    """Raised when an authenticated requester may not act on a resource."""

    pass


class ConflictError(DocVaultException):
    """Raised on uniqueness violations or stale optimistic revisions."""

    pass


class InternalError(DocVaultException):
    """Raised when the metadata store or the filesystem fails unexpectedly."""

    pass
