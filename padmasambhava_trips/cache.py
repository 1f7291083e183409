"""
Redis read-through cache for the admin dashboard counters.

The cache is optional. When it is disabled or Redis cannot be reached every
operation is a no-op and statistics are computed from the database.
"""

import json
import logging
from typing import Any, Optional, Tuple

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import get_settings

logger = logging.getLogger(__name__)


class CacheKeyBuilder:
    """Names of the keys written by the services."""

    @staticmethod
    def booking_stats() -> str:
        return "bookings:stats"

    @staticmethod
    def custom_trip_stats() -> str:
        return "custom_trips:stats"


class RedisCache:
    """JSON values in Redis behind a connection pool that may be absent."""

    def __init__(self):
        self.client: Optional[Redis] = None
        self.pool: Optional[redis.ConnectionPool] = None

    @property
    def available(self) -> bool:
        return self.client is not None

    async def initialize(self) -> None:
        """Connect to Redis, or stay disconnected if that is not possible."""
        settings = get_settings()

        if not settings.cache_enabled:
            logger.info("Stats cache disabled by configuration")
            return

        try:
            self.pool = redis.ConnectionPool.from_url(
                settings.redis_url,
                max_connections=settings.redis_max_connections,
                retry_on_timeout=True,
                socket_keepalive=True,
                health_check_interval=30
            )
            client = Redis(connection_pool=self.pool)
            await client.ping()
            self.client = client
            logger.info("Stats cache connected to %s", settings.redis_url)

        except RedisError as e:
            logger.warning("Redis unavailable, continuing without cache: %s", e)
            await self.close()

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
        if self.pool:
            await self.pool.disconnect()
        self.client = None
        self.pool = None
        logger.info("Stats cache disconnected")

    async def get(self, key: str) -> Optional[Any]:
        """Return the decoded value under ``key``; None on a miss or any Redis failure."""
        if not self.client:
            return None

        try:
            raw = await self.client.get(key)
        except RedisError as e:
            logger.warning("Cache read of %s failed: %s", key, e)
            return None

        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store ``value`` as JSON.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Expiry in seconds; no expiry when omitted

        Returns:
            Whether the value was written
        """
        if not self.client:
            return False

        try:
            payload = json.dumps(value, default=str)
            if ttl:
                await self.client.setex(key, ttl, payload)
            else:
                await self.client.set(key, payload)
        except (RedisError, TypeError) as e:
            logger.warning("Cache write of %s failed: %s", key, e)
            return False
        return True

    async def delete(self, key: str) -> bool:
        if not self.client:
            return False

        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.warning("Cache delete of %s failed: %s", key, e)
            return False
        return True

    # Entries written for stale data are ignored: every write bumps a
    # generation counter, and a reader only accepts an entry tagged with the
    # generation that is current when it reads.

    @staticmethod
    def _generation_key(key: str) -> str:
        return f"{key}:generation"

    async def get_versioned(self, key: str) -> Tuple[Optional[Any], int]:
        """
        Read an entry written by ``set_versioned``.

        Returns:
            Tuple of (value, current generation). The value is None on a miss
            or when the entry predates the latest write.
        """
        if not self.client:
            return None, 0

        try:
            generation = int(await self.client.get(self._generation_key(key)) or 0)
        except (RedisError, ValueError) as e:
            logger.warning("Cache generation read of %s failed: %s", key, e)
            return None, 0

        entry = await self.get(key)
        if not isinstance(entry, dict) or entry.get("generation") != generation:
            return None, generation
        return entry.get("value"), generation

    async def set_versioned(self, key: str, value: Any, generation: int, ttl: Optional[int] = None) -> bool:
        """Store ``value`` tagged with the generation it was computed under."""
        return await self.set(key, {"generation": generation, "value": value}, ttl=ttl)

    async def bump_generation(self, key: str) -> None:
        """Mark every entry under ``key`` as stale."""
        if not self.client:
            return

        try:
            await self.client.incr(self._generation_key(key))
        except RedisError as e:
            logger.warning("Cache generation bump of %s failed: %s", key, e)
        await self.delete(key)

    async def ping(self) -> bool:
        if not self.client:
            return False

        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False


# Shared by every request in the process
cache = RedisCache()


async def init_cache() -> None:
    await cache.initialize()


async def close_cache() -> None:
    await cache.close()


def get_cache() -> RedisCache:
    return cache


class CacheInvalidator:
    """Drops cached counters after writes."""

    @staticmethod
    async def invalidate_booking_caches() -> None:
        await cache.bump_generation(CacheKeyBuilder.booking_stats())

    @staticmethod
    async def invalidate_custom_trip_caches() -> None:
        await cache.bump_generation(CacheKeyBuilder.custom_trip_stats())
