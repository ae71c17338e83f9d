"""
In-process ingestion scheduler.

Keeps a handle on every background ingestion advancement so pending jobs can
be enumerated, awaited and drained on shutdown. Nothing is persisted: a
process restart loses every job that has not reached a terminal state.

Dependencies: asyncio
System role: Background job bookkeeping for the ingestion engine
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from docvault.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass
class DeadLetter:
    """A background advancement that raised instead of finishing."""

    ingestion_id: UUID
    error_type: str
    error_message: str
    failed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class IngestionScheduler:
    """
    Track detached ingestion tasks by ingestion id.

    Failures are never retried. They are logged and appended to
    dead_letters so an operator (or a test) can see them.
    """

    def __init__(self) -> None:
        self._tasks: dict[UUID, asyncio.Task] = {}
        self.dead_letters: list[DeadLetter] = []

    def schedule(
        self,
        ingestion_id: UUID,
        job: Callable[[], Awaitable[None]],
    ) -> asyncio.Task:
        """
        Start job in the background and return its task immediately.

        Args:
            ingestion_id: Ingestion the job advances
            job: Zero-argument coroutine function to run

        Returns:
            asyncio.Task: The detached task
        """
        task = asyncio.create_task(job(), name=f"ingestion-{ingestion_id}")
        self._tasks[ingestion_id] = task
        task.add_done_callback(lambda t: self._on_done(ingestion_id, t))
        logger.debug("Ingestion scheduled", extra={"ingestion_id": str(ingestion_id)})
        return task

    def _on_done(self, ingestion_id: UUID, task: asyncio.Task) -> None:
        if self._tasks.get(ingestion_id) is task:
            del self._tasks[ingestion_id]
        if task.cancelled():
            logger.warning(
                "Ingestion advancement cancelled",
                extra={"ingestion_id": str(ingestion_id)},
            )
            return
        exc = task.exception()
        if exc is not None:
            self.dead_letters.append(
                DeadLetter(
                    ingestion_id=ingestion_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
            )
            log_exception_with_context(
                logger,
                "Ingestion advancement failed",
                exc,
                ingestion_id=ingestion_id,
            )

    def pending(self) -> list[UUID]:
        """Return ids of ingestions whose advancement has not finished."""
        return list(self._tasks)

    def is_pending(self, ingestion_id: UUID) -> bool:
        return ingestion_id in self._tasks

    async def wait_idle(self, timeout: float | None = None) -> None:
        """
        Wait until every scheduled job (including ones scheduled meanwhile) is done.

        Jobs are never cancelled here; a timeout leaves them running.

        Raises:
            TimeoutError: Jobs still pending after timeout seconds
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while self._tasks:
            remaining = None if deadline is None else max(deadline - loop.time(), 0)
            _, pending = await asyncio.wait(list(self._tasks.values()), timeout=remaining)
            if pending:
                raise TimeoutError(f"{len(pending)} ingestion job(s) still pending")

    async def shutdown(self, timeout: float = 10.0) -> None:
        """
        Drain pending jobs, cancelling whatever is left after timeout.

        Args:
            timeout: Seconds to wait before cancelling
        """
        if not self._tasks:
            return
        logger.info(
            "Draining pending ingestions",
            extra={"pending_count": len(self._tasks)},
        )
        try:
            await self.wait_idle(timeout=timeout)
        except TimeoutError:
            remaining = list(self._tasks.values())
            logger.warning(
                "Cancelling pending ingestions after drain timeout",
                extra={"pending_count": len(remaining)},
            )
            for task in remaining:
                task.cancel()
            await asyncio.gather(*remaining, return_exceptions=True)
