"""
Test suite for ingestion endpoints.

System role: Verification of the ingestion HTTP API
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from docvault.boundary.db.models.ingestion_model import IngestionStatus
from docvault.core.exceptions import ForbiddenError, NotFoundError
from docvault.models.common import PaginatedResult
from docvault.models.ingestion import TriggerIngestionResult


def identity(role: str, user_id: uuid.UUID | None = None) -> dict[str, str]:
    """Build gateway identity headers."""
    return {"X-User-Id": str(user_id or uuid.uuid4()), "X-User-Role": role}


def test_trigger_should_return_accepted(
    client: TestClient, mock_ingestion_service: AsyncMock
) -> None:
    # Arrange
    user_id = uuid.uuid4()
    document_id = uuid.uuid4()
    ingestion_id = uuid.uuid4()
    mock_ingestion_service.trigger.return_value = TriggerIngestionResult(
        ingestion_id=ingestion_id,
        document_id=document_id,
        message="Triggered ingestion successfully. Current status: queued",
    )

    # Act
    response = client.post(
        f"/api/v1/ingestions/{document_id}/trigger", headers=identity("EDITOR", user_id)
    )

    # Assert
    assert response.status_code == 202
    assert response.json()["ingestion_id"] == str(ingestion_id)
    requester, called_document_id = mock_ingestion_service.trigger.call_args.args
    assert requester.user_id == user_id
    assert called_document_id == document_id


def test_trigger_should_map_forbidden(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    mock_ingestion_service.trigger.side_effect = ForbiddenError(
        "You do not have permission to perform this action"
    )

    response = client.post(f"/api/v1/ingestions/{uuid.uuid4()}/trigger", headers=identity("EDITOR"))

    assert response.status_code == 403


def test_trigger_should_forbid_viewer(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    response = client.post(f"/api/v1/ingestions/{uuid.uuid4()}/trigger", headers=identity("VIEWER"))

    assert response.status_code == 403
    mock_ingestion_service.trigger.assert_not_called()


def test_details_should_return_status(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    now = datetime.now(timezone.utc)
    ingestion = MagicMock(
        id=uuid.uuid4(),
        document_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        status=IngestionStatus.PROCESSING,
        logs="Ingestion triggered\nProcessing started at now",
        error_message=None,
        finished_at=None,
        created_at=now,
        updated_at=now,
    )
    mock_ingestion_service.get_details.return_value = ingestion

    response = client.get(f"/api/v1/ingestions/{ingestion.id}/details", headers=identity("VIEWER"))

    assert response.status_code == 200
    assert response.json()["status"] == "processing"


def test_details_should_map_not_found(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    mock_ingestion_service.get_details.side_effect = NotFoundError("Ingestion not found")

    response = client.get(f"/api/v1/ingestions/{uuid.uuid4()}/details", headers=identity("VIEWER"))

    assert response.status_code == 404


def test_delete_should_require_admin(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    ingestion_id = uuid.uuid4()
    mock_ingestion_service.soft_delete.return_value = (
        f"Ingestion with id {ingestion_id} has been deleted successfully"
    )

    editor = client.delete(f"/api/v1/ingestions/{ingestion_id}/delete", headers=identity("EDITOR"))
    admin = client.delete(f"/api/v1/ingestions/{ingestion_id}/delete", headers=identity("ADMIN"))

    assert editor.status_code == 403
    assert admin.status_code == 200
    mock_ingestion_service.soft_delete.assert_awaited_once_with(ingestion_id)


def test_list_should_parse_status_set(client: TestClient, mock_ingestion_service: AsyncMock) -> None:
    mock_ingestion_service.list_filtered.return_value = PaginatedResult[dict].build([], 0, 20)

    response = client.get(
        "/api/v1/ingestions/all",
        headers=identity("VIEWER"),
        params={"status": ["completed", "failed"], "has_error": "true"},
    )

    assert response.status_code == 200
    filters = mock_ingestion_service.list_filtered.call_args.args[0]
    assert filters.status == [IngestionStatus.COMPLETED, IngestionStatus.FAILED]
    assert filters.has_error is True
