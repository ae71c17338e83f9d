"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, docvault.configs
System role: Database schema initialization

Usage:
    python -m docvault.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from docvault.boundary.db.base import Base
from docvault.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from docvault.boundary.db.models.document_model import DocumentModel  # noqa: F401
from docvault.boundary.db.models.ingestion_model import IngestionModel  # noqa: F401
from docvault.boundary.db.models.user_model import UserModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged, so safe to run at every
    startup.

    Args:
        engine: Engine to use (defaults to the configured engine)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


if __name__ == "__main__":
    asyncio.run(create_all_tables())
