"""
Base CRUD operations for SQLAlchemy models.

Provides generic Create, Read, Update and soft-delete operations that can be
inherited and extended by model-specific CRUD classes. Every read states its
soft-delete predicate explicitly; nothing is filtered implicitly.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db.base import Base, utcnow

ModelT = TypeVar("ModelT", bound=Base)

TOTAL_COUNT_LABEL = "_total_count"


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations on soft-deletable models.

    Type Parameters:
        ModelT: SQLAlchemy model class with id and deleted_at columns

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    def deleted_predicates(
        self,
        include_deleted: bool = False,
        only_deleted: bool = False,
    ) -> list[ColumnElement[bool]]:
        """
        Build the soft-delete predicate for a query.

        Args:
            include_deleted: Also return soft-deleted rows
            only_deleted: Return soft-deleted rows only (wins over include_deleted)

        Returns:
            list: Zero or one WHERE clauses
        """
        if only_deleted:
            return [self.model.deleted_at.is_not(None)]
        if include_deleted:
            return []
        return [self.model.deleted_at.is_(None)]

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        include_deleted: bool = False,
    ) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: UUID primary key
            include_deleted: Return the row even if soft-deleted

        Returns:
            Model instance if found, None otherwise
        """
        return await self.find_one(session, include_deleted=include_deleted, id=id)

    async def find_one(
        self,
        session: AsyncSession,
        include_deleted: bool = False,
        **conditions: Any,
    ) -> ModelT | None:
        """
        Retrieve the first record matching column equality conditions.

        Args:
            session: Async database session
            include_deleted: Consider soft-deleted rows too
            **conditions: column_name=value pairs

        Returns:
            Model instance if found, None otherwise

        Raises:
            AttributeError: A condition names a column the model lacks
        """
        stmt = select(self.model).where(
            *self.deleted_predicates(include_deleted),
            *(getattr(self.model, name) == value for name, value in conditions.items()),
        )
        result = await session.execute(stmt.limit(1))
        return result.scalars().first()

    async def update_where(
        self,
        session: AsyncSession,
        predicates: Sequence[ColumnElement[bool]],
        values: dict[str, Any],
        synchronize_session: str | bool = "auto",
    ) -> int:
        """
        Update every row matching predicates.

        Args:
            session: Async database session
            predicates: WHERE clauses (ANDed)
            values: Column values or SQL expressions to set
            synchronize_session: ORM session synchronization strategy

        Returns:
            int: Number of rows affected
        """
        stmt = (
            update(self.model)
            .where(*predicates)
            .values(**values)
            .execution_options(synchronize_session=synchronize_session)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def soft_delete_by_id(self, session: AsyncSession, id: UUID) -> int:
        """
        Set deleted_at on a live record.

        Args:
            session: Async database session
            id: UUID primary key

        Returns:
            int: 1 if the record was live and is now deleted, 0 otherwise
        """
        return await self.update_where(
            session,
            [self.model.id == id, *self.deleted_predicates()],
            {"deleted_at": utcnow()},
        )

    async def paginate(
        self,
        session: AsyncSession,
        predicates: Sequence[ColumnElement[bool]],
        fields: Sequence[str],
        order_by: ColumnElement[Any],
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Fetch one page of projected rows and the total count of the filter.

        The total comes from a window count over the same statement, so rows
        and total always agree. An empty page past the end falls back to a
        plain COUNT with the same predicates.

        Args:
            session: Async database session
            predicates: WHERE clauses (ANDed)
            fields: Column names to project
            order_by: ORDER BY clause
            offset: Rows to skip
            limit: Maximum rows to return

        Returns:
            tuple: (list of {field: value} dicts, total matching rows)
        """
        columns = [getattr(self.model, field) for field in fields]
        stmt = (
            select(*columns, func.count().over().label(TOTAL_COUNT_LABEL))
            .where(*predicates)
            .order_by(order_by)
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        rows = result.mappings().all()

        if rows:
            total = rows[0][TOTAL_COUNT_LABEL]
        elif offset:
            count_stmt = select(func.count()).select_from(self.model).where(*predicates)
            total = (await session.execute(count_stmt)).scalar_one()
        else:
            total = 0

        items = [{field: row[field] for field in fields} for row in rows]
        return items, total
