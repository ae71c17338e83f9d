"""
Test suite for IngestionService.

Trigger, details, deletion and listing run with mocked CRUD and document
service; background advancement runs against a temporary SQLite database
with injected sleep and randomness.

System role: Verification of the ingestion state machine orchestration
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.services.document_service import DocumentService
from docvault.application.services.ingestion_service import AdvanceOptions, IngestionService
from docvault.boundary.db.CRUD.document_crud import document_crud
from docvault.boundary.db.CRUD.ingestion_crud import ingestion_crud
from docvault.boundary.db.models.ingestion_model import IngestionStatus
from docvault.configs.ingestion import IngestionSettings
from docvault.core.exceptions import ForbiddenError, InternalError, NotFoundError
from docvault.core.scheduler import IngestionScheduler
from docvault.models.auth import Requester
from docvault.models.ingestion import IngestionListFilters

CRUD_PATH = "docvault.application.services.ingestion_service.ingestion_crud"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_documents() -> MagicMock:
    """Provide mock document service."""
    documents = MagicMock(spec=DocumentService)
    documents.find_by = AsyncMock()
    return documents


@pytest.fixture
def mock_scheduler() -> MagicMock:
    """Provide mock scheduler that records scheduled jobs without running them."""
    return MagicMock(spec=IngestionScheduler)


@pytest.fixture
def mock_crud():
    """Patch the ingestion CRUD singleton used by the service."""
    with patch(CRUD_PATH) as crud:
        crud.create = AsyncMock()
        crud.get_by_id = AsyncMock()
        crud.soft_delete_by_id = AsyncMock(return_value=1)
        crud.list_filtered = AsyncMock()
        yield crud


@pytest.fixture
def ingestion_service(
    mock_db_session: AsyncSession,
    mock_documents: MagicMock,
    mock_scheduler: MagicMock,
) -> IngestionService:
    """Provide IngestionService with mocked collaborators."""
    return IngestionService(
        db=mock_db_session,
        documents=mock_documents,
        scheduler=mock_scheduler,
        session_factory=MagicMock(),
    )


def _document(owner_id: uuid.UUID) -> MagicMock:
    return MagicMock(id=uuid.uuid4(), owner_id=owner_id)


class TestAdvanceOptions:
    """Test suite for AdvanceOptions."""

    def test_from_settings_should_copy_delays(self) -> None:
        options = AdvanceOptions.from_settings(
            IngestionSettings(processing_delay_seconds=0.5, completion_delay_seconds=1.5)
        )

        assert options.processing_delay == 0.5
        assert options.completion_delay == 1.5

    def test_defaults_should_match_documented_delays(self) -> None:
        options = AdvanceOptions()

        assert options.processing_delay == 2.0
        assert options.completion_delay == 3.0


class TestTrigger:
    """Test suite for IngestionService.trigger."""

    async def test_trigger_should_create_queued_record_and_schedule(
        self,
        ingestion_service: IngestionService,
        mock_documents: MagicMock,
        mock_scheduler: MagicMock,
        mock_crud,
        mock_db_session: AsyncMock,
        owner: Requester,
    ) -> None:
        # Arrange
        document = _document(owner.user_id)
        mock_documents.find_by.return_value = document
        ingestion_id = uuid.uuid4()
        mock_crud.create.return_value = MagicMock(id=ingestion_id)

        # Act
        result = await ingestion_service.trigger(owner, document.id)

        # Assert
        assert result.ingestion_id == ingestion_id
        assert result.document_id == document.id
        assert result.message == "Triggered ingestion successfully. Current status: queued"
        kwargs = mock_crud.create.call_args.kwargs
        assert kwargs["status"] == IngestionStatus.QUEUED
        assert kwargs["logs"] == "Ingestion triggered"
        assert kwargs["user_id"] == owner.user_id
        mock_db_session.commit.assert_awaited_once()
        assert mock_scheduler.schedule.call_args.args[0] == ingestion_id

    async def test_trigger_should_allow_admin_on_foreign_document(
        self,
        ingestion_service: IngestionService,
        mock_documents: MagicMock,
        mock_crud,
        admin: Requester,
    ) -> None:
        mock_documents.find_by.return_value = _document(uuid.uuid4())
        mock_crud.create.return_value = MagicMock(id=uuid.uuid4())

        result = await ingestion_service.trigger(admin, uuid.uuid4())

        assert result.message.endswith("queued")

    async def test_trigger_should_forbid_non_owner_and_create_nothing(
        self,
        ingestion_service: IngestionService,
        mock_documents: MagicMock,
        mock_scheduler: MagicMock,
        mock_crud,
        other_editor: Requester,
    ) -> None:
        mock_documents.find_by.return_value = _document(uuid.uuid4())

        with pytest.raises(ForbiddenError):
            await ingestion_service.trigger(other_editor, uuid.uuid4())

        mock_crud.create.assert_not_called()
        mock_scheduler.schedule.assert_not_called()

    async def test_trigger_should_raise_not_found_for_missing_document(
        self,
        ingestion_service: IngestionService,
        mock_documents: MagicMock,
        mock_crud,
        owner: Requester,
    ) -> None:
        mock_documents.find_by.return_value = None

        with pytest.raises(NotFoundError):
            await ingestion_service.trigger(owner, uuid.uuid4())

        mock_crud.create.assert_not_called()

    async def test_trigger_should_look_up_live_documents_only(
        self,
        ingestion_service: IngestionService,
        mock_documents: MagicMock,
        owner: Requester,
    ) -> None:
        document_id = uuid.uuid4()
        mock_documents.find_by.return_value = None

        with pytest.raises(NotFoundError):
            await ingestion_service.trigger(owner, document_id)

        mock_documents.find_by.assert_awaited_once_with(id=document_id)


class TestDetailsAndDelete:
    """Test suite for get_details / soft_delete / list_filtered."""

    async def test_get_details_should_raise_not_found(
        self, ingestion_service: IngestionService, mock_crud
    ) -> None:
        mock_crud.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await ingestion_service.get_details(uuid.uuid4())

    async def test_soft_delete_should_return_message_and_commit(
        self, ingestion_service: IngestionService, mock_crud, mock_db_session: AsyncMock
    ) -> None:
        ingestion_id = uuid.uuid4()

        message = await ingestion_service.soft_delete(ingestion_id)

        assert message == f"Ingestion with id {ingestion_id} has been deleted successfully"
        mock_db_session.commit.assert_awaited_once()

    async def test_soft_delete_should_raise_not_found_for_deleted(
        self, ingestion_service: IngestionService, mock_crud
    ) -> None:
        mock_crud.soft_delete_by_id.return_value = 0

        with pytest.raises(NotFoundError):
            await ingestion_service.soft_delete(uuid.uuid4())

    async def test_soft_delete_should_wrap_store_failure(
        self, ingestion_service: IngestionService, mock_crud
    ) -> None:
        mock_crud.soft_delete_by_id.side_effect = RuntimeError("db down")

        with pytest.raises(InternalError):
            await ingestion_service.soft_delete(uuid.uuid4())

    async def test_list_should_hide_store_failure(
        self, ingestion_service: IngestionService, mock_crud
    ) -> None:
        mock_crud.list_filtered.side_effect = RuntimeError("db down")

        with pytest.raises(InternalError) as exc_info:
            await ingestion_service.list_filtered(IngestionListFilters())

        assert exc_info.value.message == "Failed to fetch ingestions"


class TestAdvance:
    """Test suite for background advancement against a real database."""

    @pytest.fixture
    async def queued_ingestion_id(self, session_factory) -> uuid.UUID:
        """Persist a document and a QUEUED ingestion for it."""
        async with session_factory() as session:
            document = await document_crud.create(
                session,
                owner_id=uuid.uuid4(),
                title="Doc",
                original_filename="doc.pdf",
                file_path="uploads/doc.pdf",
                mime_type="application/pdf",
                size=1,
            )
            ingestion = await ingestion_crud.create(
                session,
                user_id=document.owner_id,
                document_id=document.id,
                status=IngestionStatus.QUEUED,
                logs="Ingestion triggered",
            )
            await session.commit()
            return ingestion.id

    def _service(self, session_factory, draw: float, sleeps: list) -> IngestionService:
        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        return IngestionService(
            db=MagicMock(),
            documents=MagicMock(),
            scheduler=IngestionScheduler(),
            session_factory=session_factory,
            options=AdvanceOptions(
                sleep=fake_sleep,
                random=lambda: draw,
                clock=lambda: FIXED_NOW,
            ),
        )

    async def test_advance_should_complete_for_high_draw(
        self, session_factory, queued_ingestion_id: uuid.UUID
    ) -> None:
        # Arrange
        sleeps: list[float] = []
        service = self._service(session_factory, 0.9, sleeps)

        # Act
        await service.advance(queued_ingestion_id)

        # Assert
        async with session_factory() as session:
            stored = await ingestion_crud.get_by_id(session, queued_ingestion_id)
        assert stored.status == IngestionStatus.COMPLETED
        assert stored.error_message is None
        assert stored.finished_at is not None
        assert stored.logs.splitlines() == [
            "Ingestion triggered",
            f"Processing started at {FIXED_NOW.isoformat()}",
            f"Completed successfully at {FIXED_NOW.isoformat()}",
        ]
        assert sleeps == [2.0, 3.0]

    @pytest.mark.parametrize("draw", [0.2, 0.05])
    async def test_advance_should_fail_for_low_draw(
        self, session_factory, queued_ingestion_id: uuid.UUID, draw: float
    ) -> None:
        service = self._service(session_factory, draw, [])

        await service.advance(queued_ingestion_id)

        async with session_factory() as session:
            stored = await ingestion_crud.get_by_id(session, queued_ingestion_id)
        assert stored.status == IngestionStatus.FAILED
        assert stored.error_message == "Simulated ingestion failure"
        assert stored.logs.endswith(f"Failed at {FIXED_NOW.isoformat()}")

    async def test_advance_should_finish_even_when_ingestion_soft_deleted(
        self, session_factory, queued_ingestion_id: uuid.UUID
    ) -> None:
        async with session_factory() as session:
            await ingestion_crud.soft_delete_by_id(session, queued_ingestion_id)
            await session.commit()
        service = self._service(session_factory, 0.9, [])

        await service.advance(queued_ingestion_id)

        async with session_factory() as session:
            stored = await ingestion_crud.get_by_id(session, queued_ingestion_id, include_deleted=True)
        assert stored.status == IngestionStatus.COMPLETED

    async def test_advance_should_stop_when_not_queued(
        self, session_factory, queued_ingestion_id: uuid.UUID
    ) -> None:
        # Arrange
        service = self._service(session_factory, 0.9, [])
        await service.advance(queued_ingestion_id)

        # Act
        await service.advance(queued_ingestion_id)

        # Assert
        async with session_factory() as session:
            stored = await ingestion_crud.get_by_id(session, queued_ingestion_id)
        assert stored.status == IngestionStatus.COMPLETED
        assert len(stored.logs.splitlines()) == 3
