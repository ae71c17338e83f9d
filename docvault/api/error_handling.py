"""
HTTP exception handlers.

Maps the DocVault exception taxonomy onto status codes with an ErrorResponse
body. Internal failures never leak details to the client.

Dependencies: fastapi, docvault.core.exceptions
System role: Transport-level error translation
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docvault.core.exceptions import (
    ConflictError,
    DocVaultException,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from docvault.models.common import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

STATUS_BY_EXCEPTION: dict[type[DocVaultException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: DocVaultException) -> int:
    """Return the HTTP status for an exception, walking its MRO."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_EXCEPTION:
            return STATUS_BY_EXCEPTION[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, error: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def docvault_exception_handler(request: Request, exc: DocVaultException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        return _error_response(status_code, exc.message)
    return _error_response(status_code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install all exception handlers on an application.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(DocVaultException, docvault_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
