"""
Database models for the Padmasambhava Trips backend.
"""

from .base import Base, TimestampedBase
from .admin import Admin, AdminRole
from .booking import Booking, BookingStatus
from .custom_trip import CustomTrip, CustomTripStatus
from .sequence import SequenceCounter

__all__ = [
    "Base",
    "TimestampedBase",
    "Admin",
    "AdminRole",
    "Booking",
    "BookingStatus",
    "CustomTrip",
    "CustomTripStatus",
    "SequenceCounter",
]
