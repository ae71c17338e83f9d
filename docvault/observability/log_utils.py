"""
Structured logging helpers.

Every value passed as log context is reduced to a short string first, so a
record never carries a file body, an ORM row or an unbounded list.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
import uuid
from typing import Any

MAX_VALUE_LENGTH = 500


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value for a log record.

    UUIDs and enums log as their plain value, byte strings and collections
    as a size summary. Long results are truncated.

    Args:
        value: Value to render
        max_length: Length above which the result is cut

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        text = str(value.value)
    elif isinstance(value, (bytes, bytearray)):
        return f"bytes({len(value)})"
    elif isinstance(value, (list, tuple, set, frozenset)):
        return f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        return f"dict({len(value)} keys)"
    elif isinstance(value, (str, uuid.UUID, int, float)):
        text = str(value)
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _render(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with rendered keyword context as record attributes.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Record attributes, e.g. document_id=..., ingestion_id=...
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=_render(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    level: int = logging.ERROR,
    **context: Any,
) -> None:
    """
    Log an exception with rendered context.

    Errors carrying `message` and a `details` dict (DocVaultException)
    contribute the message and the detail keys, never the detail values.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        level: Log level; tracebacks are attached at ERROR and above
        **context: Additional record attributes
    """
    record_context = _render(context)
    record_context["error_type"] = type(exc).__name__
    record_context["error_msg"] = safe_log_value(getattr(exc, "message", None) or str(exc))
    details = getattr(exc, "details", None)
    if isinstance(details, dict) and details:
        record_context["error_detail_keys"] = ",".join(sorted(details))
    logger.log(
        level,
        message,
        exc_info=exc if level >= logging.ERROR else None,
        extra=record_context,
    )
