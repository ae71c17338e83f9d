"""
Test suite for the translate_errors service decorator.

System role: Verification of catch-log-rethrow error translation
"""

import logging

import pytest

from docvault.core.error_mapping import translate_errors
from docvault.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)


class TestTranslateErrors:
    """Test suite for translate_errors."""

    async def test_translate_errors_should_return_result_untouched(self) -> None:
        @translate_errors("noop", "Failed")
        async def operation(value: int) -> int:
            return value * 2

        assert await operation(21) == 42

    @pytest.mark.parametrize(
        "error",
        [ValidationError("bad"), NotFoundError("missing"), ConflictError("stale")],
    )
    async def test_translate_errors_should_reraise_typed_errors(self, error: Exception) -> None:
        @translate_errors("typed", "Failed")
        async def operation() -> None:
            raise error

        with pytest.raises(type(error)) as exc_info:
            await operation()

        assert exc_info.value is error

    async def test_translate_errors_should_wrap_unexpected_errors(self) -> None:
        @translate_errors("list_documents", "Failed to fetch documents")
        async def operation() -> None:
            raise KeyError("boom")

        with pytest.raises(InternalError) as exc_info:
            await operation()

        assert exc_info.value.message == "Failed to fetch documents"
        assert exc_info.value.details == {"action": "list_documents"}
        assert isinstance(exc_info.value.__cause__, KeyError)

    async def test_translate_errors_should_log_expected_errors_as_warning(self, caplog) -> None:
        @translate_errors("get_document", "Failed")
        async def operation() -> None:
            raise NotFoundError("Document not found")

        with caplog.at_level(logging.WARNING):
            with pytest.raises(NotFoundError):
                await operation()

        record = next(r for r in caplog.records if r.getMessage() == "get_document rejected")
        assert record.levelno == logging.WARNING
        assert record.action == "get_document"

    async def test_translate_errors_should_log_unexpected_errors_as_error(self, caplog) -> None:
        @translate_errors("update_document", "Failed")
        async def operation() -> None:
            raise RuntimeError("db down")

        with pytest.raises(InternalError):
            await operation()

        record = next(r for r in caplog.records if r.getMessage() == "update_document failed")
        assert record.levelno == logging.ERROR
        assert record.error_type == "RuntimeError"
