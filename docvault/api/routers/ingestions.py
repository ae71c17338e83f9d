"""
Ingestion API endpoints.

Routes:
- POST /ingestions/{document_id}/trigger - Start a simulated ingestion
- GET /ingestions/all - List ingestions with filters and projection
- GET /ingestions/{id}/details - Poll ingestion status
- DELETE /ingestions/{id}/delete - Soft-delete an ingestion (ADMIN)

Dependencies: docvault.application.services, docvault.models
System role: Ingestion HTTP API
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from docvault.api.deps import get_ingestion_service, require_roles
from docvault.application.services.ingestion_service import IngestionService
from docvault.core.authorization import UserRole
from docvault.models.auth import Requester
from docvault.models.common import PaginatedResult, SimpleMessageResponse
from docvault.models.ingestion import (
    IngestionListFilters,
    IngestionResponse,
    TriggerIngestionResult,
)

router = APIRouter(prefix="/ingestions", tags=["ingestions"])

writers = require_roles(UserRole.ADMIN, UserRole.EDITOR)
readers = require_roles(UserRole.ADMIN, UserRole.EDITOR, UserRole.VIEWER)
admins = require_roles(UserRole.ADMIN)


@router.post(
    "/{document_id}/trigger",
    response_model=TriggerIngestionResult,
    status_code=status.HTTP_202_ACCEPTED,
)
async def trigger_ingestion(
    document_id: UUID,
    requester: Requester = Depends(writers),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> TriggerIngestionResult:
    """
    Queue an ingestion for a document.

    Returns immediately with status queued; poll /ingestions/{id}/details
    for progress.

    Raises:
        ForbiddenError (403): Not the document owner and not ADMIN
        NotFoundError (404): Document missing or deleted
    """
    return await ingestion_service.trigger(requester, document_id)


@router.get("/all", response_model=PaginatedResult[dict])
async def list_ingestions(
    filters: Annotated[IngestionListFilters, Query()],
    requester: Requester = Depends(readers),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> PaginatedResult[dict]:
    """
    List ingestions with filtering, projection and pagination.

    Query parameters: page, limit, sort_order, include_deleted, only_deleted,
    select and status (repeatable), id, document_id, user_id, has_logs,
    has_error, created_from, created_to.
    """
    return await ingestion_service.list_filtered(filters)


@router.get("/{ingestion_id}/details", response_model=IngestionResponse)
async def get_ingestion_details(
    ingestion_id: UUID,
    requester: Requester = Depends(readers),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> IngestionResponse:
    """Get current status, log trail and error of a live ingestion."""
    ingestion = await ingestion_service.get_details(ingestion_id)
    return IngestionResponse.model_validate(ingestion)


@router.delete("/{ingestion_id}/delete", response_model=SimpleMessageResponse)
async def delete_ingestion(
    ingestion_id: UUID,
    requester: Requester = Depends(admins),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> SimpleMessageResponse:
    """Soft-delete an ingestion. A pending advancement still finishes."""
    message = await ingestion_service.soft_delete(ingestion_id)
    return SimpleMessageResponse(message=message)
