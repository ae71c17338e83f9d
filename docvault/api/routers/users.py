"""
User API endpoints.

Routes:
- POST /users/register - Register a new VIEWER
- GET /users/all - List non-admin users (ADMIN)
- GET /users/me/documents - The caller's own documents (ADMIN, EDITOR)
- GET /users/{id} - Non-admin user details (ADMIN)
- PATCH /users/{id} - Change a user's role (ADMIN)
- DELETE /users/{id} - Soft-delete a user (ADMIN)

Dependencies: docvault.application.services, docvault.models
System role: User registry HTTP API
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from docvault.api.deps import get_user_service, require_roles
from docvault.application.services.user_service import UserService
from docvault.core.authorization import UserRole
from docvault.models.auth import Requester
from docvault.models.common import PaginatedResult, SimpleMessageResponse
from docvault.models.user import (
    CreateUserResponse,
    UserDocumentsQuery,
    UserListFilters,
    UserRegistration,
    UserResponse,
    UserRoleUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])

admins = require_roles(UserRole.ADMIN)
writers = require_roles(UserRole.ADMIN, UserRole.EDITOR)


@router.post(
    "/register",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    registration: UserRegistration,
    user_service: UserService = Depends(get_user_service),
) -> CreateUserResponse:
    """
    Register a user in the registry.

    Called by the authentication gateway after it has created the account's
    credentials; the returned id is what it forwards as X-User-Id.

    Raises:
        ConflictError (409): Email already in use
    """
    return await user_service.register(registration)


@router.get("/all", response_model=PaginatedResult[dict])
async def list_users(
    filters: Annotated[UserListFilters, Query()],
    requester: Requester = Depends(admins),
    user_service: UserService = Depends(get_user_service),
) -> PaginatedResult[dict]:
    """
    List non-admin users with filtering, projection and pagination.

    Query parameters: page, limit, sort_order, include_deleted, only_deleted,
    select and role (repeatable), full_name, email, is_active.
    """
    return await user_service.list_filtered(filters)


@router.get("/me/documents", response_model=PaginatedResult[dict])
async def list_my_documents(
    query: Annotated[UserDocumentsQuery, Query()],
    requester: Requester = Depends(writers),
    user_service: UserService = Depends(get_user_service),
) -> PaginatedResult[dict]:
    """List the caller's live documents, newest first by default."""
    return await user_service.get_user_documents(requester.user_id, query)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    requester: Requester = Depends(admins),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Get details of a non-admin user.

    Raises:
        NotFoundError (404): No such user, or the user is an ADMIN
    """
    user = await user_service.get_details(user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=SimpleMessageResponse)
async def update_user_role(
    user_id: UUID,
    update: UserRoleUpdate,
    requester: Requester = Depends(admins),
    user_service: UserService = Depends(get_user_service),
) -> SimpleMessageResponse:
    """
    Change a user's role to EDITOR or VIEWER.

    Raises:
        ValidationError (400): Role is ADMIN or unknown
        NotFoundError (404): Missing, deleted, or ADMIN
    """
    message = await user_service.update_role(user_id, update)
    return SimpleMessageResponse(message=message)


@router.delete("/{user_id}", response_model=SimpleMessageResponse)
async def delete_user(
    user_id: UUID,
    requester: Requester = Depends(admins),
    user_service: UserService = Depends(get_user_service),
) -> SimpleMessageResponse:
    """
    Soft-delete and deactivate a user; their next request is rejected.

    Raises:
        NotFoundError (404): Missing, already deleted, or ADMIN
    """
    message = await user_service.soft_delete(user_id)
    return SimpleMessageResponse(message=message)
