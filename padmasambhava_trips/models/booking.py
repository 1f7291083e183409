"""
Booking model for trip reservations.
"""

import enum
from typing import Optional

from sqlalchemy import CheckConstraint, Enum, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import TimestampedBase


class BookingStatus(str, enum.Enum):
    """Enumeration for booking status."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class Booking(TimestampedBase):
    """A customer's request to reserve a trip departure."""

    __tablename__ = "bookings"

    booking_code: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True
    )

    # Reference into the trip catalog, which lives outside this service
    trip_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Snapshot of trip and customer details at booking time
    trip_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    travelers: Mapped[int] = mapped_column(Integer, nullable=False)
    selected_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    selected_price: Mapped[Optional[float]] = mapped_column(
        Numeric(12, 2, asdecimal=False),
        nullable=True
    )
    total_amount: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False),
        nullable=False
    )

    status: Mapped[BookingStatus] = mapped_column(
        Enum(
            BookingStatus,
            name="booking_status",
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=BookingStatus.PENDING,
        nullable=False
    )

    __table_args__ = (
        CheckConstraint("travelers >= 1", name="ck_bookings_travelers_positive"),
        CheckConstraint("total_amount >= 0", name="ck_bookings_total_amount_non_negative"),
        CheckConstraint(
            "selected_price IS NULL OR selected_price >= 0",
            name="ck_bookings_selected_price_non_negative"
        ),
        Index("ix_bookings_status_created_at", "status", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation of the booking."""
        return (
            f"<Booking(id={self.id}, code={self.booking_code}, "
            f"trip_id={self.trip_id}, travelers={self.travelers}, status={self.status.value})>"
        )
