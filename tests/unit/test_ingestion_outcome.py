"""
Test suite for the simulated ingestion outcome.

System role: Verification of the terminal-state decision
"""

from datetime import datetime, timezone

import pytest

from docvault.boundary.db.models.ingestion_model import IngestionStatus
from docvault.core.ingestion_outcome import SIMULATED_FAILURE_MESSAGE, determine_outcome

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestDetermineOutcome:
    """Test suite for determine_outcome."""

    @pytest.mark.parametrize("draw", [0.21, 0.5, 0.9, 0.999])
    def test_determine_outcome_should_complete_above_threshold(self, draw: float) -> None:
        outcome = determine_outcome(lambda: draw, now=FIXED_NOW)

        assert outcome.status == IngestionStatus.COMPLETED
        assert outcome.log_entry == f"Completed successfully at {FIXED_NOW.isoformat()}"
        assert outcome.error_message is None

    @pytest.mark.parametrize("draw", [0.0, 0.1, 0.2])
    def test_determine_outcome_should_fail_at_or_below_threshold(self, draw: float) -> None:
        outcome = determine_outcome(lambda: draw, now=FIXED_NOW)

        assert outcome.status == IngestionStatus.FAILED
        assert outcome.log_entry == f"Failed at {FIXED_NOW.isoformat()}"
        assert outcome.error_message == SIMULATED_FAILURE_MESSAGE

    def test_determine_outcome_should_draw_exactly_once(self) -> None:
        draws = iter([0.9])

        determine_outcome(lambda: next(draws))
