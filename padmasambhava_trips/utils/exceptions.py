"""
Custom exceptions for the Padmasambhava Trips backend.
"""

from typing import Any, Dict, Optional, List
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the platform."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Store errors
    DUPLICATE_KEY = "DUPLICATE_KEY"


class TripDeskError(Exception):
    """Base exception class for the booking backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with its code and optional context."""
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TripDeskError):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, List[str]]] = None, **kwargs):
        details = kwargs.pop("details", None)
        if field_errors:
            details = {"field_errors": field_errors}
        super().__init__(
            message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            **kwargs
        )
        self.field_errors = field_errors or {}

    @classmethod
    def from_field_errors(cls, field_errors: Dict[str, List[str]]) -> "ValidationError":
        """Build an error whose message enumerates every failing field."""
        parts = [
            f"{field}: {'; '.join(messages)}"
            for field, messages in field_errors.items()
        ]
        return cls(f"Validation Error: {', '.join(parts)}", field_errors=field_errors)


class NotFoundError(TripDeskError):
    """Base exception for resource not found errors."""

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_id: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id} if resource_type else None,
            **kwargs
        )


class BookingNotFoundError(NotFoundError):
    """Exception raised when a booking is not found."""

    def __init__(self, booking_id: str, **kwargs):
        super().__init__(
            "Booking not found",
            resource_type="booking",
            resource_id=str(booking_id),
            **kwargs
        )


class CustomTripNotFoundError(NotFoundError):
    """Exception raised when a custom trip request is not found."""

    def __init__(self, custom_trip_id: str, **kwargs):
        super().__init__(
            "Custom trip request not found",
            resource_type="custom_trip",
            resource_id=str(custom_trip_id),
            **kwargs
        )


class DuplicateKeyError(TripDeskError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, message: str = "A record with this information already exists", field: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.DUPLICATE_KEY,
            details={"field": field} if field else None,
            **kwargs
        )


class AuthenticationError(TripDeskError):
    """Exception raised for authentication failures."""

    def __init__(self, message: str = "You are not logged in! Please log in to get access.", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.UNAUTHORIZED,
            **kwargs
        )


class AuthorizationError(TripDeskError):
    """Exception raised for authorization failures."""

    def __init__(self, message: str = "Access denied", required_role: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.FORBIDDEN,
            details={"required_role": required_role} if required_role else None,
            **kwargs
        )

