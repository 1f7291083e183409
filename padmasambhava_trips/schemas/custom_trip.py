"""
Pydantic schemas for custom trip inquiries.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import CamelModel, OptionalText, PaginationInfo, RequiredText, StatusCount
from ..models.custom_trip import CustomTripStatus


class CustomTripCreateRequest(CamelModel):
    """Schema for the public "design my trip" form."""

    name: RequiredText = Field(..., max_length=255)
    email: EmailStr
    phone: RequiredText = Field(..., max_length=32)
    destination: RequiredText = Field(..., max_length=255)
    travelers: Optional[OptionalText] = Field(None, max_length=64)
    dates: Optional[OptionalText] = Field(None, max_length=128)
    budget: Optional[OptionalText] = Field(None, max_length=128)
    message: Optional[OptionalText] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("travelers", "dates", "budget", "message", mode="before")
    @classmethod
    def coerce_free_text(cls, v):
        """The form sends travelers as a number; blank answers count as missing."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomTripUpdateRequest(CamelModel):
    """Admin changes to an inquiry."""

    status: Optional[CustomTripStatus] = None
    admin_notes: Optional[str] = None
    quoted_price: Optional[float] = Field(None, ge=0)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("Status cannot be empty")
        return v


class CustomTripResponse(CamelModel):
    """Schema for custom trip responses."""

    id: UUID
    name: str
    email: str
    phone: str
    destination: str
    travelers: Optional[str] = None
    dates: Optional[str] = None
    budget: Optional[str] = None
    message: Optional[str] = None
    status: CustomTripStatus
    admin_notes: Optional[str] = None
    quoted_price: Optional[float] = None
    submitted_date: datetime
    updated_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CustomTripData(CamelModel):
    custom_trip: CustomTripResponse


class CustomTripEnvelope(BaseModel):
    """Single inquiry wrapped in the success envelope."""

    status: Literal["success"] = "success"
    message: Optional[str] = None
    data: CustomTripData


class CustomTripListData(CamelModel):
    custom_trips: List[CustomTripResponse]
    pagination: PaginationInfo


class CustomTripListEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: CustomTripListData


class CustomTripStatsData(BaseModel):
    total: int
    stats: List[StatusCount]


class CustomTripStatsEnvelope(BaseModel):
    """Schema for custom trip statistics responses."""

    status: Literal["success"] = "success"
    data: CustomTripStatsData
