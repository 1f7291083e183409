"""
CustomTrip model for open-ended "design my trip" inquiries.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import TimestampedBase, utcnow


class CustomTripStatus(str, enum.Enum):
    """Enumeration for custom trip request status."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    QUOTED = "quoted"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class CustomTrip(TimestampedBase):
    """A trip-design inquiry submitted from the public site."""

    __tablename__ = "custom_trips"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Free-form answers from the inquiry form
    travelers: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    dates: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    budget: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[CustomTripStatus] = mapped_column(
        Enum(
            CustomTripStatus,
            name="custom_trip_status",
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=CustomTripStatus.PENDING,
        nullable=False
    )

    # Admin-only fields
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quoted_price: Mapped[Optional[float]] = mapped_column(
        Numeric(12, 2, asdecimal=False),
        nullable=True
    )

    submitted_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "quoted_price IS NULL OR quoted_price >= 0",
            name="ck_custom_trips_quoted_price_non_negative"
        ),
        Index("ix_custom_trips_status_submitted_date", "status", "submitted_date"),
    )

    def __repr__(self) -> str:
        """String representation of the custom trip request."""
        return (
            f"<CustomTrip(id={self.id}, destination='{self.destination}', "
            f"status={self.status.value})>"
        )
