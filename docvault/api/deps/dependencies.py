"""
Dependency injection container.

Factory functions for FastAPI dependencies: process-wide singletons (storage,
scheduler), request-scoped services and the requester identity.

Dependencies: docvault.configs, docvault.application, docvault.boundary
System role: DI container for service injection
"""

from collections.abc import Callable
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docvault.application.services import (
    AdvanceOptions,
    DocumentService,
    IngestionService,
    UserService,
)
from docvault.boundary.db import get_async_db, get_async_session_factory
from docvault.boundary.storage import LocalStorage
from docvault.configs import Settings, get_settings
from docvault.core.authorization import PERMISSION_DENIED_MESSAGE, UserRole, has_role
from docvault.core.exceptions import ForbiddenError, UnauthorizedError
from docvault.core.scheduler import IngestionScheduler
from docvault.models.auth import Requester


class ServiceCache:
    """Container for process-wide service instances."""

    def __init__(self) -> None:
        self._storage: LocalStorage | None = None
        self._scheduler: IngestionScheduler | None = None

    @property
    def storage(self) -> LocalStorage:
        """Get cached storage adapter."""
        if self._storage is None:
            self._storage = LocalStorage.from_settings(get_settings().storage)
        return self._storage

    @property
    def scheduler(self) -> IngestionScheduler:
        """Get cached ingestion scheduler."""
        if self._scheduler is None:
            self._scheduler = IngestionScheduler()
        return self._scheduler

    def clear(self) -> None:
        """Clear all cached instances."""
        self._storage = None
        self._scheduler = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_storage() -> LocalStorage:
    return get_service_cache().storage


def get_scheduler() -> IngestionScheduler:
    return get_service_cache().scheduler


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return get_async_session_factory()


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    storage: LocalStorage = Depends(get_storage),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        storage: Blob storage adapter

    Returns:
        DocumentService: Document service bound to this request's session
    """
    return DocumentService(db=db, storage=storage)


def get_ingestion_service(
    db: AsyncSession = Depends(get_async_db),
    documents: DocumentService = Depends(get_document_service),
    scheduler: IngestionScheduler = Depends(get_scheduler),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings_dependency),
) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        db: Async database session (shared with the document service)
        documents: Document service for the document lookup
        scheduler: Process-wide ingestion scheduler
        session_factory: Session source for background transitions
        settings: Application settings (ingestion delays)

    Returns:
        IngestionService: Ingestion service bound to this request's session
    """
    return IngestionService(
        db=db,
        documents=documents,
        scheduler=scheduler,
        session_factory=session_factory,
        options=AdvanceOptions.from_settings(settings.ingestion),
    )


def get_user_service(
    db: AsyncSession = Depends(get_async_db),
    documents: DocumentService = Depends(get_document_service),
) -> UserService:
    """
    Get user service instance.

    Args:
        db: Async database session (shared with the document service)
        documents: Document service for per-user listings

    Returns:
        UserService: User service bound to this request's session
    """
    return UserService(db=db, documents=documents)


async def get_requester(
    x_user_id: str | None = Header(default=None),
    user_service: UserService = Depends(get_user_service),
) -> Requester:
    """
    Resolve the user the authentication gateway vouched for.

    The gateway forwards the verified user id; the role is read from the
    user registry.

    Args:
        x_user_id: X-User-Id header (UUID)
        user_service: Registry lookup

    Returns:
        Requester: Caller identity with current role

    Raises:
        UnauthorizedError: Header missing or malformed, or user unknown/inactive
    """
    if not x_user_id:
        raise UnauthorizedError("Missing requester identity")
    try:
        user_id = UUID(x_user_id)
    except ValueError as e:
        raise UnauthorizedError("Invalid requester identity") from e
    return await user_service.resolve_requester(user_id)


def require_roles(*roles: UserRole) -> Callable[..., Requester]:
    """
    Build a dependency that admits only the given roles.

    Args:
        *roles: Roles allowed to call the route

    Returns:
        Dependency returning the Requester
    """

    def dependency(requester: Requester = Depends(get_requester)) -> Requester:
        if not has_role(requester.role, roles):
            raise ForbiddenError(
                PERMISSION_DENIED_MESSAGE,
                details={"role": requester.role.value},
            )
        return requester

    return dependency
