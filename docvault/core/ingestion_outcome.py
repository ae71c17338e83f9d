"""
Simulated ingestion outcome.

Decides the terminal state of an ingestion from an injectable randomness
source. No real document processing happens anywhere in the service.

Dependencies: None (pure domain layer)
System role: Terminal-state decision for the ingestion state machine
"""

import random as _random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from docvault.boundary.db.models.ingestion_model import IngestionStatus

SUCCESS_THRESHOLD = 0.2
SIMULATED_FAILURE_MESSAGE = "Simulated ingestion failure"


@dataclass(frozen=True)
class IngestionOutcome:
    """Terminal status plus the log entry and error to persist with it."""

    status: IngestionStatus
    log_entry: str
    error_message: str | None = None


def determine_outcome(
    random: Callable[[], float] = _random.random,
    now: datetime | None = None,
) -> IngestionOutcome:
    """
    Draw once from random and map it to COMPLETED or FAILED.

    A draw strictly above SUCCESS_THRESHOLD completes; anything at or below it
    fails with SIMULATED_FAILURE_MESSAGE.

    Args:
        random: Zero-argument callable returning a float in [0, 1)
        now: Timestamp written into the log entry (defaults to UTC now)

    Returns:
        IngestionOutcome
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    if random() > SUCCESS_THRESHOLD:
        return IngestionOutcome(
            status=IngestionStatus.COMPLETED,
            log_entry=f"Completed successfully at {timestamp}",
        )
    return IngestionOutcome(
        status=IngestionStatus.FAILED,
        log_entry=f"Failed at {timestamp}",
        error_message=SIMULATED_FAILURE_MESSAGE,
    )
