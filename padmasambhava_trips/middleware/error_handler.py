"""
Error handling for the Padmasambhava Trips API.

Every failure leaves the service as ``{"status": "fail" | "error", "message": ...}``:
``fail`` for client errors (4xx) and ``error`` for server errors (5xx).
"""

import logging
import traceback
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils.exceptions import (
    TripDeskError,
    ErrorCode,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    AuthorizationError,
    DuplicateKeyError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"

STATUS_MAP = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_KEY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_envelope(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the failure envelope for a status code."""
    content: Dict[str, Any] = {
        "status": "fail" if status_code < 500 else "error",
        "message": message,
    }
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def status_code_for(exc: TripDeskError) -> int:
    """Map error codes to HTTP status codes."""
    return STATUS_MAP.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" segment FastAPI prefixes to each location
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in {"body", "query", "path", "header", "cookie"}:
        parts = parts[1:]
    return ".".join(parts)


def validation_error_from_request(exc: RequestValidationError) -> ValidationError:
    """Collapse FastAPI's validation errors into one message naming every field."""
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field_errors.setdefault(_field_name(error.get("loc", ())), []).append(error["msg"])
    return ValidationError.from_field_errors(field_errors)


async def trip_desk_error_handler(request: Request, exc: TripDeskError) -> JSONResponse:
    if isinstance(exc, (ValidationError, NotFoundError, DuplicateKeyError)):
        logger.warning(
            f"Client error: {exc.message}",
            extra={"error_code": exc.error_code.value, "path": request.url.path, "details": exc.details}
        )
    elif isinstance(exc, (AuthenticationError, AuthorizationError)):
        logger.info(
            f"Access refused: {exc.message}",
            extra={"error_code": exc.error_code.value, "path": request.url.path}
        )
    else:
        logger.error(
            f"Service error: {exc.message}",
            extra={"error_code": exc.error_code.value, "path": request.url.path, "details": exc.details}
        )

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return error_envelope(status_code_for(exc), exc.message, headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_from_request(exc)
    logger.warning(
        f"Request validation failed: {error.message}",
        extra={"path": request.url.path, "details": error.details}
    )
    return error_envelope(status.HTTP_400_BAD_REQUEST, error.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Can't find {request.url.path} on this server!"
    else:
        message = str(exc.detail)
    return error_envelope(exc.status_code, message, headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on an application."""
    app.add_exception_handler(TripDeskError, trip_desk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence: turn anything the handlers did not catch into a response."""

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc, str(uuid4()))

    def _handle_exception(self, request: Request, exc: Exception, error_id: str) -> JSONResponse:
        if isinstance(exc, TripDeskError):
            # Raised outside a route, e.g. from another middleware
            return error_envelope(status_code_for(exc), exc.message)

        if isinstance(exc, IntegrityError):
            logger.warning(
                f"Integrity error [{error_id}]: {exc.orig}",
                extra={"error_id": error_id, "path": request.url.path}
            )
            return error_envelope(status.HTTP_400_BAD_REQUEST, DuplicateKeyError().message)

        logger.error(
            f"Unexpected error [{error_id}]: {exc}",
            extra={
                "error_id": error_id,
                "error_type": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
            exc_info=exc
        )

        extra = None
        if self.debug:
            extra = {
                "error_id": error_id,
                "debug": {
                    "exception": str(exc),
                    "traceback": "".join(traceback.format_exception(exc)),
                },
            }
        return error_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE, extra=extra)
