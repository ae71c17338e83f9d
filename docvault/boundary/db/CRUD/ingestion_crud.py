"""
Ingestion CRUD operations.

Provides Create, Read, forward-only status transitions and filtered listings
for IngestionModel.

Dependencies: sqlalchemy, docvault.boundary.db.models.ingestion_model
System role: Ingestion persistence for background status tracking
"""

from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.boundary.db.CRUD.base_crud import BaseCRUD
from docvault.boundary.db.models.ingestion_model import (
    INGESTION_TRANSITIONS,
    IngestionModel,
    IngestionStatus,
)
from docvault.models.common import SortOrder
from docvault.models.ingestion import IngestionListFilters


class InvalidTransitionError(ValueError):
    """Raised when a status change would skip or reverse a state."""


class IngestionCRUD(BaseCRUD[IngestionModel]):
    """
    CRUD operations for IngestionModel.

    Status changes go through transition(), which only ever moves a row one
    step forward and only if it is still in the expected state.
    """

    def __init__(self) -> None:
        """Initialize IngestionCRUD with IngestionModel."""
        super().__init__(IngestionModel)

    async def transition(
        self,
        session: AsyncSession,
        id: UUID,
        from_status: IngestionStatus,
        to_status: IngestionStatus,
        log_entry: str,
        **fields: Any,
    ) -> int:
        """
        Move an ingestion from from_status to to_status and append a log line.

        Soft-deleted rows still transition: a scheduled job runs to completion.

        Args:
            session: Async database session
            id: Ingestion UUID
            from_status: State the row must currently be in
            to_status: Next state (must be a legal successor)
            log_entry: Line appended to the log trail
            **fields: Extra columns to set (error_message, finished_at)

        Returns:
            int: 1 if the row moved, 0 if it was missing or in another state

        Raises:
            InvalidTransitionError: to_status is not a successor of from_status
        """
        if to_status not in INGESTION_TRANSITIONS[from_status]:
            raise InvalidTransitionError(
                f"Illegal ingestion transition {from_status.value} -> {to_status.value}"
            )
        return await self.update_where(
            session,
            [IngestionModel.id == id, IngestionModel.status == from_status],
            {
                "status": to_status,
                "logs": IngestionModel.logs + f"\n{log_entry}",
                **fields,
            },
            synchronize_session=False,
        )

    def filter_predicates(self, filters: IngestionListFilters) -> list[ColumnElement[bool]]:
        """
        Translate listing filters into WHERE clauses.

        Args:
            filters: Ingestion listing filters

        Returns:
            list: Predicates to AND together
        """
        predicates = self.deleted_predicates(filters.include_deleted, filters.only_deleted)
        if filters.id:
            predicates.append(IngestionModel.id == filters.id)
        if filters.document_id:
            predicates.append(IngestionModel.document_id == filters.document_id)
        if filters.user_id:
            predicates.append(IngestionModel.user_id == filters.user_id)
        if filters.status:
            predicates.append(IngestionModel.status.in_(filters.status))
        if filters.has_logs is not None:
            predicates.append(
                and_(IngestionModel.logs.is_not(None), IngestionModel.logs != "")
                if filters.has_logs
                else or_(IngestionModel.logs.is_(None), IngestionModel.logs == "")
            )
        if filters.has_error is not None:
            predicates.append(
                and_(
                    IngestionModel.error_message.is_not(None),
                    IngestionModel.error_message != "",
                )
                if filters.has_error
                else or_(
                    IngestionModel.error_message.is_(None),
                    IngestionModel.error_message == "",
                )
            )
        if filters.created_from:
            predicates.append(IngestionModel.created_at >= filters.created_from)
        if filters.created_to:
            predicates.append(IngestionModel.created_at <= filters.created_to)
        return predicates

    async def list_filtered(
        self,
        session: AsyncSession,
        filters: IngestionListFilters,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Retrieve one page of projected ingestions and the filter's total count.

        Args:
            session: Async database session
            filters: Filters, projection, pagination and sort order

        Returns:
            tuple: (projected rows, total count)
        """
        order_by = (
            IngestionModel.updated_at.asc()
            if filters.sort_order == SortOrder.ASC
            else IngestionModel.updated_at.desc()
        )
        return await self.paginate(
            session,
            self.filter_predicates(filters),
            filters.select,
            order_by,
            filters.offset,
            filters.limit,
        )


ingestion_crud = IngestionCRUD()
