"""
User service orchestrator.

Maintains the user registry that documents and ingestions reference:
registration, admin management (list, details, role change, soft delete),
the requester lookup behind every authenticated request and the "my
documents" listing.

Dependencies: docvault.boundary.db, docvault.application.services.document_service
System role: User registry orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.services.document_service import DocumentService
from docvault.boundary.db.CRUD.user_crud import user_crud
from docvault.boundary.db.models.user_model import UserModel
from docvault.core.authorization import UserRole
from docvault.core.error_mapping import translate_errors
from docvault.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from docvault.models.auth import Requester
from docvault.models.common import PaginatedResult
from docvault.models.user import (
    CreateUserResponse,
    UserDocumentsQuery,
    UserListFilters,
    UserRegistration,
    UserRoleUpdate,
)
from docvault.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class UserService:
    """
    User service orchestrator.

    ADMIN accounts are created only by bootstrap and are invisible to the
    admin management operations.
    """

    def __init__(self, db: AsyncSession, documents: DocumentService) -> None:
        """
        Initialize user service.

        Args:
            db: AsyncSession for user records
            documents: Document service for per-user listings
        """
        self.db = db
        self.documents = documents

    @translate_errors("register_user", "Failed to create user")
    async def register(self, registration: UserRegistration) -> CreateUserResponse:
        """
        Register a new VIEWER.

        Args:
            registration: Full name and email

        Returns:
            CreateUserResponse: New user id and role

        Raises:
            ConflictError: Email already registered
        """
        try:
            user = await user_crud.create(
                self.db,
                full_name=registration.full_name.strip(),
                email=registration.email.lower(),
                role=UserRole.VIEWER,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("Email already in use") from e
        await self.db.commit()

        log_with_context(logger, logging.INFO, "User registered", user_id=user.id)
        return CreateUserResponse(id=user.id, role=user.role)

    @translate_errors("bootstrap_admin", "Failed to bootstrap admin user")
    async def ensure_admin(self, full_name: str, email: str) -> UUID:
        """
        Make sure an active ADMIN with this email exists.

        An existing user with the email is promoted and reactivated.

        Returns:
            UUID: The admin's user id
        """
        email = email.lower()
        user = await user_crud.find_one(self.db, include_deleted=True, email=email)
        if user is None:
            user = await user_crud.create(
                self.db, full_name=full_name, email=email, role=UserRole.ADMIN
            )
        else:
            await user_crud.update_where(
                self.db,
                [UserModel.id == user.id],
                {"role": UserRole.ADMIN, "is_active": True, "deleted_at": None},
            )
        await self.db.commit()

        log_with_context(logger, logging.INFO, "Admin user ensured", user_id=user.id)
        return user.id

    @translate_errors("resolve_requester", "Failed to resolve requester")
    async def resolve_requester(self, user_id: UUID) -> Requester:
        """
        Turn a gateway-authenticated user id into a Requester.

        The role always comes from the registry, so role changes apply to the
        next request.

        Raises:
            UnauthorizedError: Unknown, deleted or inactive user
        """
        user = await user_crud.get_active(self.db, user_id)
        if user is None:
            raise UnauthorizedError("Unknown or inactive user")
        return Requester(user_id=user.id, role=user.role)

    @translate_errors("list_users", "Failed to fetch users")
    async def list_filtered(self, filters: UserListFilters) -> PaginatedResult[dict]:
        """
        List non-admin users with filters, projection and pagination.

        Args:
            filters: Name/email/role/activity filters, soft-delete inclusion, select, page

        Returns:
            PaginatedResult: Projected rows plus total count and pages
        """
        items, total = await user_crud.list_filtered(self.db, filters)
        logger.info(
            "Fetched users",
            extra={"page": filters.page, "returned": len(items), "total": total},
        )
        return PaginatedResult[dict].build(items, total, filters.limit)

    @translate_errors("get_user", "Something went wrong while fetching user")
    async def get_details(self, user_id: UUID) -> UserModel:
        """
        Get a non-admin user, including soft-deleted ones.

        Raises:
            NotFoundError: No such user, or the user is an ADMIN
        """
        user = await user_crud.get_managed(self.db, user_id)
        if user is None:
            raise NotFoundError("User not found", resource="user", resource_id=str(user_id))
        return user

    @translate_errors("update_user_role", "Something went wrong while updating user")
    async def update_role(self, user_id: UUID, update: UserRoleUpdate) -> str:
        """
        Change a live non-admin user's role.

        Args:
            user_id: User to change
            update: New role (EDITOR or VIEWER)

        Returns:
            str: Confirmation naming the new role

        Raises:
            NotFoundError: Missing, deleted, or ADMIN
        """
        rowcount = await user_crud.update_role(self.db, user_id, update.role)
        if rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(
                f"User with id {user_id} not found or cannot update admin user",
                resource="user",
                resource_id=str(user_id),
            )
        await self.db.commit()

        log_with_context(
            logger, logging.INFO, "User role updated", user_id=user_id, role=update.role.value
        )
        return f"New user role: {update.role.value}"

    @translate_errors("delete_user", "Something went wrong while deleting the user")
    async def soft_delete(self, user_id: UUID) -> str:
        """
        Soft-delete and deactivate a non-admin user.

        Their documents stay in place; the user can no longer make requests.

        Raises:
            NotFoundError: Missing, already deleted, or ADMIN
        """
        rowcount = await user_crud.deactivate(self.db, user_id)
        if rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(
                f"User with ID {user_id} not found, already deleted, or is an admin",
                resource="user",
                resource_id=str(user_id),
            )
        await self.db.commit()

        log_with_context(logger, logging.INFO, "User soft-deleted", user_id=user_id)
        return f"User with id {user_id} has been deleted successfully"

    async def get_user_documents(
        self, user_id: UUID, query: UserDocumentsQuery
    ) -> PaginatedResult[dict]:
        """List a user's own live documents without storage paths."""
        return await self.documents.get_user_documents(user_id, query, include_file_path=False)
