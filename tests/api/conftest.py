"""
Router test fixtures.

Provides: application with mocked services and storage, and a requester
stand-in that takes the role from an X-User-Role test header instead of the
user registry
Dependencies: fastapi, pytest
System role: HTTP layer test infrastructure
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from fastapi import FastAPI, Header
from fastapi.testclient import TestClient

from docvault.api.deps import (
    get_document_service,
    get_ingestion_service,
    get_requester,
    get_storage,
    get_user_service,
)
from docvault.api.main import create_app
from docvault.boundary.storage.local_storage import LocalStorage
from docvault.core.authorization import UserRole
from docvault.core.exceptions import UnauthorizedError
from docvault.models.auth import Requester


async def requester_from_headers(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Requester:
    """Build the requester straight from test headers."""
    if not x_user_id or not x_user_role:
        raise UnauthorizedError("Missing requester identity")
    try:
        return Requester(user_id=UUID(x_user_id), role=UserRole(x_user_role))
    except ValueError as e:
        raise UnauthorizedError("Invalid requester identity") from e


@pytest.fixture
def mock_document_service() -> AsyncMock:
    """Provide mock document service."""
    return AsyncMock()


@pytest.fixture
def mock_ingestion_service() -> AsyncMock:
    """Provide mock ingestion service."""
    return AsyncMock()


@pytest.fixture
def mock_user_service() -> AsyncMock:
    """Provide mock user service."""
    return AsyncMock()


@pytest.fixture
def mock_storage() -> MagicMock:
    """Provide mock storage adapter."""
    storage = MagicMock(spec=LocalStorage)
    storage.save_upload = AsyncMock()
    storage.delete = AsyncMock()
    storage.to_relative.side_effect = lambda path: path
    return storage


@pytest.fixture
def app(
    mock_document_service: AsyncMock,
    mock_ingestion_service: AsyncMock,
    mock_user_service: AsyncMock,
    mock_storage: MagicMock,
) -> FastAPI:
    """Provide the application with all services overridden."""
    app = create_app()
    app.dependency_overrides[get_document_service] = lambda: mock_document_service
    app.dependency_overrides[get_ingestion_service] = lambda: mock_ingestion_service
    app.dependency_overrides[get_user_service] = lambda: mock_user_service
    app.dependency_overrides[get_storage] = lambda: mock_storage
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide TestClient whose requester comes from test headers."""
    app.dependency_overrides[get_requester] = requester_from_headers
    return TestClient(app)


@pytest.fixture
def registry_client(app: FastAPI) -> TestClient:
    """Provide TestClient that resolves requesters through the user service."""
    return TestClient(app)
