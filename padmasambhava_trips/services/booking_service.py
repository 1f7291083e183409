"""
Booking service covering the booking lifecycle: create, list, fetch, update,
delete and dashboard statistics.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import CacheInvalidator, CacheKeyBuilder, get_cache
from ..config import get_settings
from ..models.base import utcnow
from ..models.booking import Booking, BookingStatus
from ..schemas.booking import BookingCreateRequest, BookingUpdateRequest
from ..utils.exceptions import BookingNotFoundError, DuplicateKeyError, ValidationError
from .booking_code import allocate_booking_code, reserve_booking_code
from .filters import escape_like, parse_status_filter

logger = logging.getLogger(__name__)


class BookingService:
    """Service for managing trip bookings."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.cache = get_cache()

    async def create_booking(self, booking_data: BookingCreateRequest) -> Booking:
        """
        Create a new booking in the Pending state.

        Args:
            booking_data: Validated booking form data

        Returns:
            Created booking instance

        Raises:
            DuplicateKeyError: When the booking code is already taken
        """
        values = booking_data.model_dump(exclude={"booking_code"})

        try:
            if booking_data.booking_code:
                booking_code = booking_data.booking_code
                await reserve_booking_code(self.session, booking_code)
            else:
                booking_code = await allocate_booking_code(self.session)

            booking = Booking(
                **values,
                booking_code=booking_code,
                status=BookingStatus.PENDING,
            )
            self.session.add(booking)
            await self.session.flush()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Integrity error during booking creation: {e.orig}")
            raise DuplicateKeyError(field="bookingCode")

        await self.session.refresh(booking)
        await CacheInvalidator.invalidate_booking_caches()

        logger.info(f"Booking {booking.booking_code} created for trip {booking.trip_id}")
        return booking

    async def get_booking(self, booking_id: UUID) -> Booking:
        """
        Get a booking by ID.

        Raises:
            BookingNotFoundError: When no booking has this ID
        """
        result = await self.session.execute(
            select(Booking).where(Booking.id == booking_id)
        )
        booking = result.scalar_one_or_none()
        if booking is None:
            raise BookingNotFoundError(str(booking_id))
        return booking

    async def list_bookings(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Booking], int]:
        """
        List bookings newest first.

        Args:
            status: Exact status to filter on; ``all`` or empty disables the filter
            search: Case-insensitive substring matched against customer name,
                email, trip name, booking code and phone
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (bookings on the page, total matching bookings)
        """
        limit = limit or self.settings.default_page_size
        if page < 1:
            raise ValidationError.from_field_errors({"page": ["must be at least 1"]})
        if limit < 1:
            raise ValidationError.from_field_errors({"limit": ["must be at least 1"]})

        conditions = []

        status_value = parse_status_filter(status, BookingStatus)
        if status_value is not None:
            conditions.append(Booking.status == status_value)

        term = (search or "").strip()
        if term:
            pattern = f"%{escape_like(term)}%"
            conditions.append(
                or_(
                    Booking.customer_name.ilike(pattern, escape="\\"),
                    Booking.email.ilike(pattern, escape="\\"),
                    Booking.trip_name.ilike(pattern, escape="\\"),
                    Booking.booking_code.ilike(pattern, escape="\\"),
                    Booking.phone.ilike(pattern, escape="\\"),
                )
            )

        count_query = select(func.count(Booking.id)).where(*conditions)
        total = (await self.session.execute(count_query)).scalar_one()

        query = (
            select(Booking)
            .where(*conditions)
            .order_by(desc(Booking.created_at), desc(Booking.booking_code))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def update_booking(self, booking_id: UUID, update_data: BookingUpdateRequest) -> Booking:
        """
        Apply an admin update to a booking.

        Only fields present in the request are written. The booking code and
        creation time are never changed.
        """
        booking = await self.get_booking(booking_id)

        changes = update_data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(booking, field, value)
        booking.updated_at = utcnow()

        await self.session.flush()
        await self.session.commit()
        await self.session.refresh(booking)
        await CacheInvalidator.invalidate_booking_caches()

        logger.info(f"Booking {booking.booking_code} updated: {sorted(changes)}")
        return booking

    async def delete_booking(self, booking_id: UUID) -> Booking:
        """
        Permanently delete a booking.

        Returns:
            The deleted booking, detached from the session
        """
        booking = await self.get_booking(booking_id)

        await self.session.delete(booking)
        await self.session.commit()
        await CacheInvalidator.invalidate_booking_caches()

        logger.info(f"Booking {booking.booking_code} deleted")
        return booking

    async def get_booking_stats(self) -> Dict[str, Any]:
        """
        Count bookings per status and sum their revenue.

        Revenue excludes cancelled bookings. The result is cached briefly and
        dropped on every booking write.
        """
        cache_key = CacheKeyBuilder.booking_stats()
        cached, generation = await self.cache.get_versioned(cache_key)
        if cached is not None:
            return cached

        rows = (
            await self.session.execute(
                select(
                    Booking.status,
                    func.count(Booking.id).label("count"),
                    func.coalesce(func.sum(Booking.total_amount), 0).label("amount"),
                ).group_by(Booking.status)
            )
        ).all()

        counts = {status: 0 for status in BookingStatus}
        amounts = {status: 0.0 for status in BookingStatus}
        for status, count, amount in rows:
            counts[status] = count
            amounts[status] = float(amount or 0)

        stats = {
            "total_bookings": sum(counts.values()),
            "confirmed_bookings": counts[BookingStatus.CONFIRMED],
            "pending_bookings": counts[BookingStatus.PENDING],
            "cancelled_bookings": counts[BookingStatus.CANCELLED],
            "total_revenue": round(
                amounts[BookingStatus.PENDING] + amounts[BookingStatus.CONFIRMED], 2
            ),
            "confirmed_revenue": round(amounts[BookingStatus.CONFIRMED], 2),
            "by_status": [
                {"status": status.value, "count": counts[status]}
                for status in BookingStatus
            ],
        }

        await self.cache.set_versioned(
            cache_key, stats, generation, ttl=self.settings.stats_cache_ttl_seconds
        )
        return stats
