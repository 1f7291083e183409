"""Business logic services for the Padmasambhava Trips backend."""

from .admin_service import AdminService
from .booking_service import BookingService
from .custom_trip_service import CustomTripService

__all__ = ["AdminService", "BookingService", "CustomTripService"]
