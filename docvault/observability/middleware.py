"""
HTTP middleware for request tracing.

CorrelationMiddleware binds one correlation id per request and echoes it in
the X-Correlation-ID response header. RequestLoggingMiddleware emits one
completion record per request with status, duration and the caller id.

Dependencies: fastapi, docvault.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from docvault.observability.correlation import clear_correlation_id, set_correlation_id
from docvault.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Polled by orchestrators; logged at DEBUG only
QUIET_PATH_PREFIXES = ("/health",)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, or its exception if it fails."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "user_id": request.headers.get("X-User-Id"),
        }

        try:
            response = await call_next(request)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{request.method} {request.url.path} raised",
                e,
                duration_ms=_elapsed_ms(started),
                **context,
            )
            raise

        if request.url.path.startswith(QUIET_PATH_PREFIXES):
            level = logging.DEBUG
        elif response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        log_with_context(
            logger,
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            **context,
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id for the request and echo it on the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Reuse the caller's X-Correlation-ID or generate one."""
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
