"""
End-to-end ingestion lifecycle tests.

Trigger goes through the real scheduler, which advances the ingestion in
the background against a temporary SQLite database with short delays.

System role: Verification of the asynchronous ingestion state machine
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.services.document_service import DocumentService
from docvault.application.services.ingestion_service import AdvanceOptions, IngestionService
from docvault.boundary.db.models.ingestion_model import IngestionStatus
from docvault.boundary.storage.local_storage import LocalStorage
from docvault.core.exceptions import ForbiddenError, NotFoundError
from docvault.core.scheduler import IngestionScheduler
from docvault.models.auth import Requester
from docvault.models.document import DocumentMetadata
from docvault.models.ingestion import IngestionListFilters


def _services(
    session: AsyncSession,
    storage: LocalStorage,
    scheduler: IngestionScheduler,
    session_factory,
    draw: float | None = None,
) -> tuple[DocumentService, IngestionService]:
    documents = DocumentService(db=session, storage=storage)
    options = AdvanceOptions(processing_delay=0.2, completion_delay=0.05)
    if draw is not None:
        options.random = lambda: draw
    return documents, IngestionService(
        db=session,
        documents=documents,
        scheduler=scheduler,
        session_factory=session_factory,
        options=options,
    )


@pytest.fixture
async def owned_document_id(
    db_session: AsyncSession, storage: LocalStorage, owner: Requester
) -> uuid.UUID:
    """Upload a document owned by the owner fixture."""
    blob = await storage.save_upload(owner.user_id, "paper.pdf", b"%PDF", "application/pdf")
    documents = DocumentService(db=db_session, storage=storage)
    return await documents.create(owner.user_id, DocumentMetadata(title="Paper"), blob)


class TestIngestionLifecycle:
    """End-to-end scenarios for IngestionService."""

    async def test_trigger_should_queue_then_reach_terminal_state(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        owner: Requester,
        owned_document_id: uuid.UUID,
    ) -> None:
        # Arrange
        _, ingestions = _services(db_session, storage, scheduler, session_factory)

        # Act
        result = await ingestions.trigger(owner, owned_document_id)
        queued = await ingestions.get_details(result.ingestion_id)

        # Assert
        assert queued.status == IngestionStatus.QUEUED
        assert scheduler.is_pending(result.ingestion_id)

        await scheduler.wait_idle(timeout=5)

        async with session_factory() as fresh:
            _, reader = _services(fresh, storage, scheduler, session_factory)
            finished = await reader.get_details(result.ingestion_id)
        assert finished.status in {IngestionStatus.COMPLETED, IngestionStatus.FAILED}
        assert finished.finished_at is not None
        assert scheduler.dead_letters == []

    @pytest.mark.parametrize(
        ("draw", "status"),
        [(0.9, IngestionStatus.COMPLETED), (0.1, IngestionStatus.FAILED)],
    )
    async def test_trigger_should_follow_randomness_source(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        owner: Requester,
        owned_document_id: uuid.UUID,
        draw: float,
        status: IngestionStatus,
    ) -> None:
        _, ingestions = _services(db_session, storage, scheduler, session_factory, draw=draw)

        result = await ingestions.trigger(owner, owned_document_id)
        await scheduler.wait_idle(timeout=5)

        async with session_factory() as fresh:
            _, reader = _services(fresh, storage, scheduler, session_factory)
            finished = await reader.get_details(result.ingestion_id)
        assert finished.status == status
        assert (finished.error_message is not None) == (status == IngestionStatus.FAILED)

    async def test_trigger_by_stranger_should_create_no_record(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        other_editor: Requester,
        owned_document_id: uuid.UUID,
    ) -> None:
        _, ingestions = _services(db_session, storage, scheduler, session_factory)

        with pytest.raises(ForbiddenError):
            await ingestions.trigger(other_editor, owned_document_id)

        page = await ingestions.list_filtered(IngestionListFilters(include_deleted=True))
        assert page.total_count == 0
        assert scheduler.pending() == []

    async def test_trigger_on_deleted_document_should_raise_not_found(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        owner: Requester,
        owned_document_id: uuid.UUID,
    ) -> None:
        documents, ingestions = _services(db_session, storage, scheduler, session_factory)
        await documents.soft_delete(await documents.get_details(owned_document_id))

        with pytest.raises(NotFoundError):
            await ingestions.trigger(owner, owned_document_id)

    async def test_trigger_on_unknown_document_should_raise_not_found(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        owner: Requester,
    ) -> None:
        _, ingestions = _services(db_session, storage, scheduler, session_factory)

        with pytest.raises(NotFoundError):
            await ingestions.trigger(owner, uuid.uuid4())

    async def test_deleted_ingestion_should_still_finish_but_stay_hidden(
        self,
        db_session: AsyncSession,
        storage: LocalStorage,
        scheduler: IngestionScheduler,
        session_factory,
        admin: Requester,
        owned_document_id: uuid.UUID,
    ) -> None:
        # Arrange
        _, ingestions = _services(db_session, storage, scheduler, session_factory, draw=0.9)
        result = await ingestions.trigger(admin, owned_document_id)

        # Act
        message = await ingestions.soft_delete(result.ingestion_id)
        await scheduler.wait_idle(timeout=5)

        # Assert
        assert message == f"Ingestion with id {result.ingestion_id} has been deleted successfully"
        async with session_factory() as fresh:
            _, reader = _services(fresh, storage, scheduler, session_factory)
            with pytest.raises(NotFoundError):
                await reader.get_details(result.ingestion_id)
            page = await reader.list_filtered(
                IngestionListFilters(only_deleted=True, select=["id", "status"])
            )
        assert page.items == [{"id": result.ingestion_id, "status": IngestionStatus.COMPLETED}]
