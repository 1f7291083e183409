"""
Custom trip service for "design my trip" inquiries.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import CacheInvalidator, CacheKeyBuilder, get_cache
from ..config import get_settings
from ..models.base import utcnow
from ..models.custom_trip import CustomTrip, CustomTripStatus
from ..schemas.custom_trip import CustomTripCreateRequest, CustomTripUpdateRequest
from ..utils.exceptions import CustomTripNotFoundError, ValidationError
from .filters import escape_like, parse_status_filter

logger = logging.getLogger(__name__)


class CustomTripService:
    """Service class for custom trip inquiries."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.cache = get_cache()

    async def submit_custom_trip(self, trip_data: CustomTripCreateRequest) -> CustomTrip:
        """
        Store a new inquiry in the pending state.

        Args:
            trip_data: Validated inquiry form data

        Returns:
            The created inquiry
        """
        custom_trip = CustomTrip(
            **trip_data.model_dump(),
            status=CustomTripStatus.PENDING,
            submitted_date=utcnow(),
        )
        self.session.add(custom_trip)
        await self.session.commit()
        await self.session.refresh(custom_trip)
        await CacheInvalidator.invalidate_custom_trip_caches()

        logger.info(f"Custom trip request {custom_trip.id} submitted for {custom_trip.destination}")
        return custom_trip

    async def get_custom_trip(self, custom_trip_id: UUID) -> CustomTrip:
        result = await self.session.execute(
            select(CustomTrip).where(CustomTrip.id == custom_trip_id)
        )
        custom_trip = result.scalar_one_or_none()
        if custom_trip is None:
            raise CustomTripNotFoundError(str(custom_trip_id))
        return custom_trip

    async def list_custom_trips(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[CustomTrip], int]:
        """
        List inquiries, most recently submitted first.

        Returns:
            Tuple of (inquiries on the page, total matching inquiries)
        """
        limit = limit or self.settings.default_page_size
        if page < 1 or limit < 1:
            raise ValidationError.from_field_errors(
                {"page" if page < 1 else "limit": ["must be at least 1"]}
            )

        conditions = []

        status_value = parse_status_filter(status, CustomTripStatus)
        if status_value is not None:
            conditions.append(CustomTrip.status == status_value)

        term = (search or "").strip()
        if term:
            pattern = f"%{escape_like(term)}%"
            conditions.append(
                or_(
                    CustomTrip.name.ilike(pattern, escape="\\"),
                    CustomTrip.email.ilike(pattern, escape="\\"),
                    CustomTrip.destination.ilike(pattern, escape="\\"),
                    CustomTrip.phone.ilike(pattern, escape="\\"),
                )
            )

        total = (
            await self.session.execute(select(func.count(CustomTrip.id)).where(*conditions))
        ).scalar_one()

        result = await self.session.execute(
            select(CustomTrip)
            .where(*conditions)
            .order_by(desc(CustomTrip.submitted_date), desc(CustomTrip.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def update_custom_trip(
        self,
        custom_trip_id: UUID,
        update_data: CustomTripUpdateRequest
    ) -> CustomTrip:
        """Apply admin changes and stamp the update time."""
        custom_trip = await self.get_custom_trip(custom_trip_id)

        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(custom_trip, field, value)
        custom_trip.updated_date = utcnow()

        await self.session.commit()
        await self.session.refresh(custom_trip)
        await CacheInvalidator.invalidate_custom_trip_caches()

        logger.info(f"Custom trip request {custom_trip.id} updated to {custom_trip.status.value}")
        return custom_trip

    async def delete_custom_trip(self, custom_trip_id: UUID) -> None:
        custom_trip = await self.get_custom_trip(custom_trip_id)

        await self.session.delete(custom_trip)
        await self.session.commit()
        await CacheInvalidator.invalidate_custom_trip_caches()

        logger.info(f"Custom trip request {custom_trip_id} deleted")

    async def get_custom_trip_stats(self) -> Dict[str, Any]:
        """Count inquiries per status, plus the grand total."""
        cache_key = CacheKeyBuilder.custom_trip_stats()
        cached, generation = await self.cache.get_versioned(cache_key)
        if cached is not None:
            return cached

        rows = (
            await self.session.execute(
                select(CustomTrip.status, func.count(CustomTrip.id))
                .group_by(CustomTrip.status)
            )
        ).all()

        stats = {
            "total": sum(count for _, count in rows),
            "stats": [{"status": status.value, "count": count} for status, count in rows],
        }

        await self.cache.set_versioned(
            cache_key, stats, generation, ttl=self.settings.stats_cache_ttl_seconds
        )
        return stats
