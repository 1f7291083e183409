"""Middleware components for the Padmasambhava Trips backend."""

from .error_handler import ErrorHandlerMiddleware, register_exception_handlers
from .validation import ValidationMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "ValidationMiddleware",
    "LoggingMiddleware",
    "register_exception_handlers",
]
