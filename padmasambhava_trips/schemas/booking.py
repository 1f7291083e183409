"""
Pydantic schemas for booking-related API requests and responses.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import CamelModel, OptionalText, PaginationInfo, RequiredText, StatusCount
from ..models.booking import BookingStatus


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and value == "":
        return None
    return value


class BookingCreateRequest(CamelModel):
    """Schema for creating a new booking from the public booking form."""

    trip_id: RequiredText = Field(..., max_length=64, description="Identifier of the booked trip")
    trip_name: RequiredText = Field(..., max_length=255, description="Trip name at booking time")
    customer_name: RequiredText = Field(..., max_length=255)
    email: EmailStr
    phone: RequiredText = Field(..., max_length=32)
    message: Optional[OptionalText] = None
    travelers: int = Field(..., ge=1, description="Number of travelers")
    selected_date: Optional[OptionalText] = Field(None, max_length=64)
    selected_price: Optional[float] = Field(None, ge=0, description="Per-person price shown to the customer")
    total_amount: float = Field(..., ge=0, description="Total amount quoted to the customer")

    # Imported records may carry their historical code
    booking_code: Optional[RequiredText] = Field(None, max_length=32)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        """Trim and lower-case the address before it is validated."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("message", "selected_date")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)


class BookingUpdateRequest(CamelModel):
    """Fields an admin may change on an existing booking."""

    status: Optional[BookingStatus] = None
    message: Optional[OptionalText] = None
    selected_date: Optional[OptionalText] = Field(None, max_length=64)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("Booking status cannot be empty")
        return v

    @field_validator("message", "selected_date")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)


class BookingResponse(CamelModel):
    """Schema for booking responses."""

    id: UUID
    booking_code: str
    trip_id: str
    trip_name: str
    customer_name: str
    email: str
    phone: str
    message: Optional[str] = None
    travelers: int
    selected_date: Optional[str] = None
    selected_price: Optional[float] = None
    total_amount: float
    status: BookingStatus
    created_at: datetime
    updated_at: datetime


class BookingData(BaseModel):
    booking: BookingResponse


class BookingEnvelope(BaseModel):
    """Single booking wrapped in the success envelope."""

    status: Literal["success"] = "success"
    message: Optional[str] = None
    data: BookingData


class BookingListData(BaseModel):
    bookings: List[BookingResponse]
    pagination: PaginationInfo


class BookingListEnvelope(BaseModel):
    """Schema for booking list responses."""

    status: Literal["success"] = "success"
    results: int
    data: BookingListData


class BookingStats(CamelModel):
    """Dashboard counters for the admin console."""

    total_bookings: int
    confirmed_bookings: int
    pending_bookings: int
    cancelled_bookings: int
    total_revenue: float = Field(..., description="Sum of totalAmount over bookings that are not cancelled")
    confirmed_revenue: float = Field(..., description="Sum of totalAmount over confirmed bookings")
    by_status: List[StatusCount]


class BookingStatsData(BaseModel):
    stats: BookingStats


class BookingStatsEnvelope(BaseModel):
    """Schema for booking statistics responses."""

    status: Literal["success"] = "success"
    data: BookingStatsData
