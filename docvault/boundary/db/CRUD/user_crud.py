"""
User CRUD operations.

Provides user lookups, role changes and soft deletes that never touch ADMIN
rows, plus the filtered user listing.

Dependencies: sqlalchemy, docvault.boundary.db.models.user_model
System role: User persistence operations
"""

from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db.base import utcnow
from docvault.boundary.db.CRUD.base_crud import BaseCRUD
from docvault.boundary.db.models.user_model import UserModel
from docvault.core.authorization import UserRole
from docvault.models.common import SortOrder
from docvault.models.user import UserListFilters


class UserCRUD(BaseCRUD[UserModel]):
    """
    CRUD operations for UserModel.

    Admin-facing reads and writes exclude ADMIN rows so one admin cannot
    demote or delete another.
    """

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_active(self, session: AsyncSession, id: UUID) -> UserModel | None:
        """
        Get a live, active user of any role.

        Args:
            session: Async database session
            id: User UUID

        Returns:
            UserModel if the user may make requests, None otherwise
        """
        return await self.find_one(session, id=id, is_active=True)

    async def get_managed(self, session: AsyncSession, id: UUID) -> UserModel | None:
        """
        Get a non-admin user, deleted or not.

        Args:
            session: Async database session
            id: User UUID

        Returns:
            UserModel if found and not ADMIN, None otherwise
        """
        stmt = select(UserModel).where(UserModel.id == id, UserModel.role != UserRole.ADMIN)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def update_role(self, session: AsyncSession, id: UUID, role: UserRole) -> int:
        """
        Change the role of a live non-admin user.

        Returns:
            int: Rows affected (0 when missing, deleted or ADMIN)
        """
        return await self.update_where(
            session,
            [UserModel.id == id, UserModel.role != UserRole.ADMIN, *self.deleted_predicates()],
            {"role": role},
        )

    async def deactivate(self, session: AsyncSession, id: UUID) -> int:
        """
        Soft-delete and deactivate a live non-admin user.

        Returns:
            int: Rows affected (0 when missing, already deleted or ADMIN)
        """
        return await self.update_where(
            session,
            [UserModel.id == id, UserModel.role != UserRole.ADMIN, *self.deleted_predicates()],
            {"deleted_at": utcnow(), "is_active": False},
        )

    def filter_predicates(self, filters: UserListFilters) -> list[ColumnElement[bool]]:
        """
        Translate listing filters into WHERE clauses.

        Args:
            filters: User listing filters

        Returns:
            list: Predicates to AND together
        """
        predicates = self.deleted_predicates(filters.include_deleted, filters.only_deleted)
        predicates.append(UserModel.role != UserRole.ADMIN)
        if filters.full_name:
            predicates.append(UserModel.full_name.ilike(f"%{filters.full_name}%"))
        if filters.email:
            predicates.append(UserModel.email.ilike(f"%{filters.email}%"))
        if filters.role:
            predicates.append(UserModel.role.in_(filters.role))
        if filters.is_active is not None:
            predicates.append(UserModel.is_active.is_(filters.is_active))
        return predicates

    async def list_filtered(
        self,
        session: AsyncSession,
        filters: UserListFilters,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Retrieve one page of projected users and the filter's total count.

        Args:
            session: Async database session
            filters: Filters, projection, pagination and sort order

        Returns:
            tuple: (projected rows, total count)
        """
        order_by = (
            UserModel.created_at.asc()
            if filters.sort_order == SortOrder.ASC
            else UserModel.created_at.desc()
        )
        return await self.paginate(
            session,
            self.filter_predicates(filters),
            filters.select,
            order_by,
            filters.offset,
            filters.limit,
        )


user_crud = UserCRUD()
