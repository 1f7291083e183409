"""
FastAPI routes for custom trip inquiries.
"""

import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db
from ..models.admin import Admin
from ..schemas.common import ErrorResponse, PaginationInfo, SuccessResponse
from ..schemas.custom_trip import (
    CustomTripCreateRequest,
    CustomTripData,
    CustomTripEnvelope,
    CustomTripListData,
    CustomTripListEnvelope,
    CustomTripResponse,
    CustomTripStatsData,
    CustomTripStatsEnvelope,
    CustomTripUpdateRequest,
)
from ..services.custom_trip_service import CustomTripService
from ..utils.dependencies import get_current_admin
from ..utils.logging_config import log_business_event

router = APIRouter(prefix="/custom-trips", tags=["custom-trips"])
settings = get_settings()

SUBMITTED_MESSAGE = (
    "Custom trip request submitted successfully. "
    "Our travel expert will contact you within 24 hours."
)


def _envelope(custom_trip, message: Optional[str] = None) -> CustomTripEnvelope:
    return CustomTripEnvelope(
        message=message,
        data=CustomTripData(custom_trip=CustomTripResponse.model_validate(custom_trip)),
    )


@router.post(
    "",
    response_model=CustomTripEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def submit_custom_trip(
    trip_data: CustomTripCreateRequest,
    db: AsyncSession = Depends(get_db)
) -> CustomTripEnvelope:
    """Submit a "design my trip" inquiry from the storefront."""
    custom_trip = await CustomTripService(db).submit_custom_trip(trip_data)

    log_business_event(
        "custom_trip_submitted",
        {"custom_trip_id": str(custom_trip.id), "destination": custom_trip.destination}
    )
    return _envelope(custom_trip, SUBMITTED_MESSAGE)


@router.get("", response_model=CustomTripListEnvelope)
async def list_custom_trips(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Matches name, email, destination or phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> CustomTripListEnvelope:
    custom_trips, total = await CustomTripService(db).list_custom_trips(
        status=status_filter,
        search=search,
        page=page,
        limit=limit,
    )

    return CustomTripListEnvelope(
        results=len(custom_trips),
        data=CustomTripListData(
            custom_trips=[CustomTripResponse.model_validate(t) for t in custom_trips],
            pagination=PaginationInfo(total=total, page=page, pages=math.ceil(total / limit)),
        ),
    )


@router.get("/admin/stats", response_model=CustomTripStatsEnvelope)
async def get_custom_trip_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> CustomTripStatsEnvelope:
    """Inquiry counts per status."""
    stats = await CustomTripService(db).get_custom_trip_stats()
    return CustomTripStatsEnvelope(data=CustomTripStatsData.model_validate(stats))


@router.get("/{custom_trip_id}", response_model=CustomTripEnvelope)
async def get_custom_trip(
    custom_trip_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> CustomTripEnvelope:
    custom_trip = await CustomTripService(db).get_custom_trip(custom_trip_id)
    return _envelope(custom_trip)


@router.patch("/{custom_trip_id}", response_model=CustomTripEnvelope)
async def update_custom_trip(
    custom_trip_id: UUID,
    update_data: CustomTripUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> CustomTripEnvelope:
    """Update status, notes or quoted price of an inquiry."""
    custom_trip = await CustomTripService(db).update_custom_trip(custom_trip_id, update_data)

    log_business_event(
        "custom_trip_updated",
        {"custom_trip_id": str(custom_trip.id), "trip_status": custom_trip.status.value},
        admin_id=str(current_admin.id)
    )
    return _envelope(custom_trip, "Custom trip request updated successfully")


@router.delete("/{custom_trip_id}", response_model=SuccessResponse)
async def delete_custom_trip(
    custom_trip_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
) -> SuccessResponse:
    await CustomTripService(db).delete_custom_trip(custom_trip_id)

    log_business_event(
        "custom_trip_deleted",
        {"custom_trip_id": str(custom_trip_id)},
        admin_id=str(current_admin.id)
    )
    return SuccessResponse(message="Custom trip request deleted successfully")
