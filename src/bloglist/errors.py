"""
Service errors and their HTTP rendering.

Store functions raise the ServiceError subclasses below; the handlers
installed by ``register_exception_handlers`` turn them into JSON bodies of
the form ``{"error": message}``. Anything else becomes a 500 carrying only a
short error id, with the full details logged server-side.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    # Duplicate usernames are reported as a plain bad request on the wire.
    status_code = status.HTTP_400_BAD_REQUEST


def log_and_sanitize_error(
    error: Exception,
    context: str,
) -> tuple[str, str]:
    """
    Log full error details server-side and return sanitized message for client.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "GET /api/blogs")

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "%s failed [%s]: %s: %s",
        context,
        error_id,
        type(error).__name__,
        error,
        exc_info=error,
    )

    sanitized = f"internal server error (Error ID: {error_id})"

    return sanitized, error_id


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "invalid request")
        if location:
            message = f"{location}: {message}"
    else:
        message = "invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    message, _ = log_and_sanitize_error(exc, f"{request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
