"""
Database connection management.

Provides async SQLAlchemy engine, session factory, and FastAPI dependency
for database session injection.

Dependencies: sqlalchemy, docvault.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docvault.configs import get_settings
from docvault.configs.database import DatabaseSettings


def create_engine_from_settings(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine for the configured database.

    PostgreSQL gets a sized connection pool with pre-ping; SQLite URLs use the
    dialect's default pool since pool sizing does not apply there.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    if db_config.is_sqlite:
        return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,  # Verify connections before using
    )


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Get the process-wide async engine.

    Returns:
        AsyncEngine: Engine built from get_settings().database

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    return create_engine_from_settings(get_settings().database)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory bound to engine.

    autocommit=False and autoflush=False keep transaction control explicit;
    expire_on_commit=False lets callers read attributes after commit.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Session factory
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the process-wide async session factory.

    Background ingestion advancement opens its own sessions from this factory
    because the triggering request's session is closed by then.

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return create_session_factory(get_async_engine())


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and ensures it's closed
    after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Usage:
        from fastapi import Depends

        @router.get("/documents/{id}")
        async def get_document(id: UUID, db: AsyncSession = Depends(get_async_db)):
            return await document_crud.get_by_id(db, id)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session
