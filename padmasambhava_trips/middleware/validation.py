"""
Request validation middleware: size limits, content types and JSON syntax.
"""

import json
import logging
from typing import Optional

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .error_handler import error_envelope

logger = logging.getLogger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH"}


class ValidationMiddleware(BaseHTTPMiddleware):
    """Reject malformed request bodies before they reach a route."""

    def __init__(self, app, max_request_size: int = 10 * 1024 * 1024):  # 10MB default
        super().__init__(app)
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next):
        if self._too_large(request):
            return error_envelope(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"Request too large. Maximum size is {self.max_request_size} bytes"
            )

        if request.method in BODY_METHODS:
            body = await request.body()
            # Bodiless calls such as logout carry no content type
            if body:
                error = self._validate_content_type(request) or self._validate_json_payload(body)
                if error:
                    return error

        return await call_next(request)

    def _too_large(self, request: Request) -> bool:
        content_length = request.headers.get("content-length")
        if not content_length:
            return False
        try:
            return int(content_length) > self.max_request_size
        except ValueError:
            return False

    def _validate_content_type(self, request: Request) -> Optional[JSONResponse]:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            return None

        logger.info(f"Rejected {request.method} {request.url.path} with content type '{content_type}'")
        return error_envelope(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            "Invalid content type. Set Content-Type header to application/json"
        )

    def _validate_json_payload(self, body: bytes) -> Optional[JSONResponse]:
        try:
            json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return error_envelope(status.HTTP_400_BAD_REQUEST, f"Invalid JSON payload: {e}")
        return None
