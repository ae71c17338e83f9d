"""
Metadata/blob partial-failure join.

Runs a metadata write and a blob cleanup concurrently, waits for both to
settle, then applies the asymmetric policy: the metadata outcome decides the
operation, the blob outcome is only ever logged.

Dependencies: asyncio
System role: Consistency policy between the metadata store and the filesystem
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from docvault.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


async def _noop() -> None:
    return None


def _report_blob_failure(exc: BaseException, context: dict[str, Any]) -> None:
    log_exception_with_context(
        logger,
        "Blob cleanup failed; metadata outcome stands",
        exc,
        level=logging.WARNING,
        **context,
    )


async def settle_metadata_and_blob(
    metadata_write: Awaitable[int],
    blob_cleanup: Awaitable[Any] | None,
    **context: Any,
) -> int:
    """
    Settle a metadata write and an optional blob cleanup together.

    Neither task cancels the other. A blob cleanup failure is logged and
    swallowed; a metadata failure is re-raised after both have settled.

    Args:
        metadata_write: Awaitable returning the number of affected rows
        blob_cleanup: Awaitable deleting the obsolete blob, or None
        **context: Extra fields for log events (document_id, file_path, ...)

    Returns:
        int: Rows affected by the metadata write

    Raises:
        Exception: Whatever the metadata write raised
    """
    metadata_result, blob_result = await asyncio.gather(
        metadata_write,
        blob_cleanup if blob_cleanup is not None else _noop(),
        return_exceptions=True,
    )

    if isinstance(blob_result, BaseException):
        _report_blob_failure(blob_result, context)

    if isinstance(metadata_result, BaseException):
        raise metadata_result

    return metadata_result


async def cleanup_blob_after(blob_cleanup: Awaitable[Any], **context: Any) -> None:
    """
    Run a blob cleanup after its metadata write has matched a row.

    Same policy as settle_metadata_and_blob: a failure is logged only.

    Args:
        blob_cleanup: Awaitable deleting the obsolete blob
        **context: Extra fields for log events
    """
    (result,) = await asyncio.gather(blob_cleanup, return_exceptions=True)
    if isinstance(result, BaseException):
        _report_blob_failure(result, context)
