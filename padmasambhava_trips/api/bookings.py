"""
FastAPI routes for the booking lifecycle.

Creating a booking is public (the storefront booking form); everything else
is for authenticated admins.
"""

import logging
import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db
from ..models.admin import Admin
from ..schemas.booking import (
    BookingCreateRequest,
    BookingData,
    BookingEnvelope,
    BookingListData,
    BookingListEnvelope,
    BookingResponse,
    BookingStats,
    BookingStatsData,
    BookingStatsEnvelope,
    BookingUpdateRequest,
)
from ..schemas.common import ErrorResponse, PaginationInfo, SuccessResponse
from ..services.booking_service import BookingService
from ..utils.dependencies import get_current_admin
from ..utils.logging_config import log_business_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])
settings = get_settings()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Not logged in"},
    403: {"model": ErrorResponse, "description": "Account deactivated"},
    404: {"model": ErrorResponse, "description": "Booking not found"},
}


def _booking_envelope(booking, message: Optional[str] = None) -> BookingEnvelope:
    return BookingEnvelope(
        message=message,
        data=BookingData(booking=BookingResponse.model_validate(booking)),
    )


@router.post(
    "",
    response_model=BookingEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
)
async def create_booking(
    booking_data: BookingCreateRequest,
    db: AsyncSession = Depends(get_db)
) -> BookingEnvelope:
    """
    Submit a booking from the storefront.

    The booking always starts as Pending and receives the next sequential
    booking code unless the request carries one.
    """
    booking = await BookingService(db).create_booking(booking_data)

    log_business_event(
        "booking_created",
        {
            "booking_code": booking.booking_code,
            "trip_id": booking.trip_id,
            "travelers": booking.travelers,
            "total_amount": booking.total_amount,
        }
    )
    return _booking_envelope(booking, "Booking created successfully")


@router.get(
    "",
    response_model=BookingListEnvelope,
    responses={k: ERROR_RESPONSES[k] for k in (400, 401, 403)},
)
async def list_bookings(
    status_filter: Optional[str] = Query(
        None, alias="status", description="Pending, Confirmed, Cancelled or all"
    ),
    search: Optional[str] = Query(
        None, description="Matches customer name, email, trip name, booking code or phone"
    ),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"
    ),
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> BookingListEnvelope:
    """List bookings newest first with optional status filter and search."""
    bookings, total = await BookingService(db).list_bookings(
        status=status_filter,
        search=search,
        page=page,
        limit=limit,
    )

    return BookingListEnvelope(
        results=len(bookings),
        data=BookingListData(
            bookings=[BookingResponse.model_validate(b) for b in bookings],
            pagination=PaginationInfo(
                total=total,
                page=page,
                pages=math.ceil(total / limit),
            ),
        ),
    )


# Registered before "/{booking_id}" so "admin" is not read as an id
@router.get(
    "/admin/stats",
    response_model=BookingStatsEnvelope,
    responses={k: ERROR_RESPONSES[k] for k in (401, 403)},
)
async def get_booking_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> BookingStatsEnvelope:
    """Dashboard counters: bookings per status and revenue."""
    stats = await BookingService(db).get_booking_stats()
    return BookingStatsEnvelope(data=BookingStatsData(stats=BookingStats.model_validate(stats)))


@router.get(
    "/{booking_id}",
    response_model=BookingEnvelope,
    responses=ERROR_RESPONSES,
)
async def get_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> BookingEnvelope:
    booking = await BookingService(db).get_booking(booking_id)
    return _booking_envelope(booking)


@router.patch(
    "/{booking_id}",
    response_model=BookingEnvelope,
    responses=ERROR_RESPONSES,
)
async def update_booking(
    booking_id: UUID,
    update_data: BookingUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> BookingEnvelope:
    """
    Update a booking's status or admin-editable details.

    ``bookingCode`` and ``createdAt`` are ignored if sent.
    """
    booking = await BookingService(db).update_booking(booking_id, update_data)

    log_business_event(
        "booking_updated",
        {
            "booking_code": booking.booking_code,
            "fields": sorted(update_data.model_fields_set),
            "booking_status": booking.status.value,
        },
        admin_id=str(current_admin.id)
    )
    return _booking_envelope(booking, "Booking updated successfully")


@router.delete(
    "/{booking_id}",
    response_model=SuccessResponse,
    responses=ERROR_RESPONSES,
)
async def delete_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> SuccessResponse:
    """Permanently delete a booking."""
    booking = await BookingService(db).delete_booking(booking_id)

    log_business_event(
        "booking_deleted",
        {"booking_code": booking.booking_code},
        admin_id=str(current_admin.id)
    )
    return SuccessResponse(message="Booking deleted successfully")
