"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, docvault.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from docvault import __version__
from docvault.api import api_router
from docvault.api.deps.dependencies import get_service_cache
from docvault.api.error_handling import register_exception_handlers
from docvault.application.services import DocumentService, UserService
from docvault.boundary.db.connection import get_async_engine, get_async_session_factory
from docvault.boundary.db.create_tables import create_all_tables
from docvault.boundary.storage import LocalStorage
from docvault.configs import Settings, get_settings
from docvault.observability import configure_logging
from docvault.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware


async def _bootstrap_admin(settings: Settings, storage: LocalStorage) -> None:
    """Ensure the configured ADMIN exists so roles can be managed over the API."""
    email = settings.users.bootstrap_admin_email
    if not email:
        return
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        users = UserService(db=session, documents=DocumentService(db=session, storage=storage))
        await users.ensure_admin(settings.users.bootstrap_admin_name, email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup configures logging, the schema for SQLite and the bootstrap
    ADMIN. Shutdown drains pending ingestions, then disposes the engine.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    # Startup
    if settings.database.is_sqlite:
        await create_all_tables()
    cache = get_service_cache()
    await _bootstrap_admin(settings, cache.storage)
    logger.info(
        "DocVault started",
        extra={"environment": settings.environment, "storage_root": cache.storage.root},
    )

    yield

    # Shutdown
    await cache.scheduler.shutdown(timeout=settings.ingestion.drain_timeout_seconds)
    dead_letters = len(cache.scheduler.dead_letters)
    if dead_letters:
        logger.warning("Ingestions failed during run", extra={"dead_letter_count": dead_letters})
    cache.clear()
    await get_async_engine().dispose()
    logger.info("DocVault stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="DocVault API",
        description="Document storage with simulated asynchronous ingestion",
        version=__version__,
        debug=get_settings().debug,
        lifespan=lifespan,
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docvault.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
