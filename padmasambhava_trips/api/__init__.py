"""API endpoints for the Padmasambhava Trips backend."""

from fastapi import APIRouter
from .auth import router as auth_router
from .bookings import router as bookings_router
from .custom_trips import router as custom_trips_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")

# Include all routers
api_router.include_router(auth_router)
api_router.include_router(bookings_router)
api_router.include_router(custom_trips_router)

__all__ = ["api_router"]
