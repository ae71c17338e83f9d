"""
Ingestion service orchestrator.

Triggers simulated post-upload processing of a document and advances each
ingestion through QUEUED -> PROCESSING -> COMPLETED/FAILED in the background.
The triggering request returns as soon as the QUEUED record is committed.

Dependencies: docvault.boundary.db, docvault.core, docvault.configs
System role: Ingestion state machine and background advancement
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docvault.application.services.document_service import DocumentService
from docvault.boundary.db.CRUD.ingestion_crud import ingestion_crud
from docvault.boundary.db.models.ingestion_model import IngestionModel, IngestionStatus
from docvault.configs.ingestion import IngestionSettings
from docvault.core.authorization import ensure_allowed
from docvault.core.error_mapping import translate_errors
from docvault.core.exceptions import NotFoundError
from docvault.core.ingestion_outcome import determine_outcome
from docvault.core.scheduler import IngestionScheduler
from docvault.models.auth import Requester
from docvault.models.common import PaginatedResult
from docvault.models.ingestion import IngestionListFilters, TriggerIngestionResult
from docvault.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

TRIGGERED_LOG_ENTRY = "Ingestion triggered"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AdvanceOptions:
    """
    Injectable timing and randomness for background advancement.

    Attributes:
        sleep: Awaitable delay function
        random: Zero-argument float source in [0, 1)
        processing_delay: Seconds before QUEUED -> PROCESSING
        completion_delay: Seconds before PROCESSING -> terminal
        clock: Current-time source for log entries and finished_at
    """

    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    random: Callable[[], float] = random.random
    processing_delay: float = 2.0
    completion_delay: float = 3.0
    clock: Callable[[], datetime] = field(default=_utcnow)

    @classmethod
    def from_settings(cls, settings: IngestionSettings) -> "AdvanceOptions":
        return cls(
            processing_delay=settings.processing_delay_seconds,
            completion_delay=settings.completion_delay_seconds,
        )


class IngestionService:
    """
    Ingestion service orchestrator.

    Request-scoped operations use the injected session; background advancement
    opens a fresh session from session_factory for every transition.
    """

    def __init__(
        self,
        db: AsyncSession,
        documents: DocumentService,
        scheduler: IngestionScheduler,
        session_factory: async_sessionmaker[AsyncSession],
        options: AdvanceOptions | None = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            db: Request-scoped AsyncSession
            documents: Document service used for the document lookup
            scheduler: Tracks background advancements
            session_factory: Source of sessions for background transitions
            options: Delays, randomness and clock (defaults to AdvanceOptions())
        """
        self.db = db
        self.documents = documents
        self.scheduler = scheduler
        self.session_factory = session_factory
        self.options = options or AdvanceOptions()

    @translate_errors("trigger_ingestion", "Failed to trigger ingestion")
    async def trigger(self, requester: Requester, document_id: UUID) -> TriggerIngestionResult:
        """
        Create a QUEUED ingestion for a document and schedule its advancement.

        Args:
            requester: Authenticated caller
            document_id: Live document to ingest

        Returns:
            TriggerIngestionResult: New ingestion id, document id and message

        Raises:
            NotFoundError: Document missing or soft-deleted
            ForbiddenError: Requester neither owns the document nor is ADMIN
        """
        document = await self.documents.find_by(id=document_id)
        if document is None:
            raise NotFoundError(
                "Document not found", resource="document", resource_id=str(document_id)
            )

        ensure_allowed(requester.user_id, requester.role, document.owner_id)

        ingestion = await ingestion_crud.create(
            self.db,
            user_id=requester.user_id,
            document_id=document_id,
            status=IngestionStatus.QUEUED,
            logs=TRIGGERED_LOG_ENTRY,
        )
        ingestion_id = ingestion.id
        await self.db.commit()

        self.scheduler.schedule(ingestion_id, lambda: self.advance(ingestion_id))

        log_with_context(
            logger,
            logging.INFO,
            "Ingestion triggered",
            ingestion_id=ingestion_id,
            document_id=document_id,
            user_id=requester.user_id,
        )
        return TriggerIngestionResult(
            ingestion_id=ingestion_id,
            document_id=document_id,
            message=f"Triggered ingestion successfully. Current status: {IngestionStatus.QUEUED.value}",
        )

    async def advance(self, ingestion_id: UUID, options: AdvanceOptions | None = None) -> None:
        """
        Drive one ingestion from QUEUED to a terminal state.

        Runs detached from any request. Each transition is conditional on the
        expected current status, so a row that was moved elsewhere is left
        alone. Exceptions propagate to the scheduler, which dead-letters them.

        Args:
            ingestion_id: Ingestion to advance
            options: Overrides for self.options
        """
        opts = options or self.options

        await opts.sleep(opts.processing_delay)
        moved = await self._transition(
            ingestion_id,
            IngestionStatus.QUEUED,
            IngestionStatus.PROCESSING,
            f"Processing started at {opts.clock().isoformat()}",
        )
        if not moved:
            return

        await opts.sleep(opts.completion_delay)
        finished_at = opts.clock()
        outcome = determine_outcome(opts.random, now=finished_at)
        await self._transition(
            ingestion_id,
            IngestionStatus.PROCESSING,
            outcome.status,
            outcome.log_entry,
            error_message=outcome.error_message,
            finished_at=finished_at,
        )

    async def _transition(
        self,
        ingestion_id: UUID,
        from_status: IngestionStatus,
        to_status: IngestionStatus,
        log_entry: str,
        **fields,
    ) -> bool:
        async with self.session_factory() as session:
            rowcount = await ingestion_crud.transition(
                session, ingestion_id, from_status, to_status, log_entry, **fields
            )
            await session.commit()

        if rowcount == 0:
            logger.warning(
                "Ingestion not in expected state; advancement stopped",
                extra={
                    "ingestion_id": str(ingestion_id),
                    "expected_status": from_status.value,
                    "target_status": to_status.value,
                },
            )
            return False

        logger.info(
            f"Ingestion {to_status.value}",
            extra={"ingestion_id": str(ingestion_id), "status": to_status.value},
        )
        return True

    @translate_errors("get_ingestion", "Failed to fetch ingestion")
    async def get_details(self, ingestion_id: UUID) -> IngestionModel:
        """
        Get a live ingestion.

        Raises:
            NotFoundError: Ingestion missing or soft-deleted
        """
        ingestion = await ingestion_crud.get_by_id(self.db, ingestion_id)
        if ingestion is None:
            raise NotFoundError(
                "Ingestion not found", resource="ingestion", resource_id=str(ingestion_id)
            )
        return ingestion

    @translate_errors("delete_ingestion", "Failed to delete ingestion")
    async def soft_delete(self, ingestion_id: UUID) -> str:
        """
        Soft-delete a live ingestion. A pending advancement still runs to completion.

        Raises:
            NotFoundError: Ingestion missing or already deleted
        """
        rowcount = await ingestion_crud.soft_delete_by_id(self.db, ingestion_id)
        if rowcount == 0:
            raise NotFoundError(
                "Ingestion not found", resource="ingestion", resource_id=str(ingestion_id)
            )
        await self.db.commit()
        logger.info("Ingestion soft-deleted", extra={"ingestion_id": str(ingestion_id)})
        return f"Ingestion with id {ingestion_id} has been deleted successfully"

    @translate_errors("list_ingestions", "Failed to fetch ingestions")
    async def list_filtered(self, filters: IngestionListFilters) -> PaginatedResult[dict]:
        """
        List ingestions matching filters with projection and pagination.

        Args:
            filters: Id/document/user/status/log/error/date filters, select, page

        Returns:
            PaginatedResult: Projected rows plus total count and pages
        """
        items, total = await ingestion_crud.list_filtered(self.db, filters)
        return PaginatedResult[dict].build(items, total, filters.limit)
