"""
Service-boundary error translation.

A single decorator applied to every public service operation: it logs the
failure with the action name and guarantees that only DocVaultException
subclasses cross the component boundary.

Dependencies: docvault.core.exceptions, docvault.observability
System role: Catch-log-rethrow layer for services
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from docvault.core.exceptions import (
    DocVaultException,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from docvault.observability.log_utils import log_exception_with_context

F = TypeVar("F", bound=Callable[..., Any])

# Caller-correctable errors are logged as warnings, everything else as errors
_EXPECTED_ERRORS = (ValidationError, NotFoundError, ForbiddenError, UnauthorizedError)


def translate_errors(
    action: str,
    internal_message: str,
    logger: logging.Logger | None = None,
) -> Callable[[F], F]:
    """
    Wrap an async service method with logging and error translation.

    Typed DocVault errors are re-raised unchanged. Any other exception is
    logged with its traceback and replaced by InternalError(internal_message).

    Args:
        action: Action name recorded on the log event (e.g. "update_document")
        internal_message: Opaque message used for InternalError
        logger: Logger to emit on (defaults to the wrapped function's module)

    Returns:
        Decorator for async callables
    """

    def decorator(func: F) -> F:
        log = logger or logging.getLogger(func.__module__)
        source = func.__qualname__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except _EXPECTED_ERRORS as e:
                log_exception_with_context(
                    log,
                    f"{action} rejected",
                    e,
                    level=logging.WARNING,
                    action=action,
                    source=source,
                )
                raise
            except DocVaultException as e:
                log_exception_with_context(
                    log, f"{action} failed", e, action=action, source=source
                )
                raise
            except Exception as e:
                log_exception_with_context(
                    log, f"{action} failed", e, action=action, source=source
                )
                raise InternalError(internal_message, details={"action": action}) from e

        return wrapper  # type: ignore

    return decorator
