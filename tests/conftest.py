"""
Shared test fixtures and configuration for entire test suite.

Provides: temporary storage root, file-backed SQLite engine and sessions,
requester identities, ingestion scheduler
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from docvault.boundary.db.create_tables import create_all_tables
from docvault.boundary.db.connection import create_session_factory
from docvault.boundary.storage.local_storage import LocalStorage
from docvault.core.authorization import UserRole
from docvault.core.scheduler import IngestionScheduler
from docvault.models.auth import Requester


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Provide an empty directory used as the storage root."""
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def storage(storage_root: Path) -> LocalStorage:
    """Provide LocalStorage rooted at the temporary directory."""
    return LocalStorage(root=str(storage_root), max_upload_bytes=1024 * 1024)


@pytest.fixture
async def engine(tmp_path: Path):
    """
    Create a file-backed SQLite async engine with all tables.

    A file (not :memory:) lets background sessions see committed rows.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'docvault.db'}")
    await create_all_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Provide session factory bound to the test engine."""
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Provide a request-style session with rollback on teardown."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def scheduler() -> IngestionScheduler:
    """Provide a fresh ingestion scheduler."""
    return IngestionScheduler()


@pytest.fixture
def owner() -> Requester:
    """Provide an EDITOR who owns test documents."""
    return Requester(user_id=uuid.uuid4(), role=UserRole.EDITOR)


@pytest.fixture
def other_editor() -> Requester:
    """Provide an EDITOR who owns nothing."""
    return Requester(user_id=uuid.uuid4(), role=UserRole.EDITOR)


@pytest.fixture
def admin() -> Requester:
    """Provide an ADMIN requester."""
    return Requester(user_id=uuid.uuid4(), role=UserRole.ADMIN)


@pytest.fixture
def viewer() -> Requester:
    """Provide a VIEWER requester."""
    return Requester(user_id=uuid.uuid4(), role=UserRole.VIEWER)
