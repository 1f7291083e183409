"""Tests for health endpoints, the stats cache and the admin bootstrap command."""

import json

import pytest

from padmasambhava_trips.cache import CacheKeyBuilder, get_cache
from padmasambhava_trips.cli import create_admin, create_admin_account, list_admin_accounts
from padmasambhava_trips.models import AdminRole


class FakeRedis:
    """Just enough of the redis client for the cache wrapper."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value.encode("utf-8")

    async def set(self, key, value):
        self.store[key] = value.encode("utf-8")

    async def delete(self, key):
        self.store.pop(key, None)

    async def incr(self, key):
        value = int(self.store.get(key, b"0")) + 1
        self.store[key] = str(value).encode("utf-8")
        return value

    async def ping(self):
        return True


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(get_cache(), "client", fake)
    return fake


class TestHealth:

    async def test_liveness(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy", "service": "padmasambhava-trips"}

    async def test_detailed_without_cache_is_degraded(self, client):
        body = (await client.get("/health/detailed")).json()

        assert body["status"] == "degraded"
        services = {s["service"]: s for s in body["services"]}
        assert services["database"]["healthy"] is True
        assert services["redis"]["healthy"] is False
        assert services["redis"]["critical"] is False

    async def test_detailed_with_cache_is_healthy(self, client, fake_redis):
        body = (await client.get("/health/detailed")).json()
        assert body["status"] == "healthy"
        assert body["summary"]["healthy_services"] == 2


class TestStatsCache:

    async def test_stats_are_cached_and_dropped_on_write(
        self, client, auth_headers, create_booking, fake_redis
    ):
        await create_booking()
        stats_url = "/api/v1/bookings/admin/stats"

        first = (await client.get(stats_url, headers=auth_headers)).json()["data"]["stats"]
        assert first["totalBookings"] == 1
        cached = json.loads(fake_redis.store[CacheKeyBuilder.booking_stats()])
        assert cached["value"]["total_bookings"] == 1

        await create_booking()
        assert CacheKeyBuilder.booking_stats() not in fake_redis.store

        second = (await client.get(stats_url, headers=auth_headers)).json()["data"]["stats"]
        assert second["totalBookings"] == 2

    async def test_cached_value_is_served(self, client, auth_headers, admin, fake_redis):
        await get_cache().set_versioned(
            CacheKeyBuilder.custom_trip_stats(),
            {"total": 5, "stats": [{"status": "quoted", "count": 5}]},
            generation=0,
        )

        response = await client.get("/api/v1/custom-trips/admin/stats", headers=auth_headers)

        assert response.json()["data"]["total"] == 5

    async def test_result_computed_before_a_write_is_not_served(
        self, client, auth_headers, create_booking, fake_redis
    ):
        key = CacheKeyBuilder.booking_stats()
        cache = get_cache()
        await create_booking()

        # A stats request reads the generation, then a write lands before it stores its result
        _, generation = await cache.get_versioned(key)
        second = await create_booking()
        await client.patch(
            f"/api/v1/bookings/{second['id']}", json={"status": "Confirmed"}, headers=auth_headers
        )
        await cache.set_versioned(key, {"total_bookings": 1}, generation)

        stats = (
            await client.get("/api/v1/bookings/admin/stats", headers=auth_headers)
        ).json()["data"]["stats"]

        assert stats["totalBookings"] == 2
        assert stats["confirmedBookings"] == 1
        assert sum(item["count"] for item in stats["byStatus"]) == stats["totalBookings"]


class TestCreateAdminCommand:

    async def test_create_and_list_accounts(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'admins.db'}"

        created = await create_admin_account(
            "Karma Yeshe", "Karma@PadmasambhavaTrips.com", "long-enough-pass", database_url=url
        )
        assert created.role == AdminRole.SUPER_ADMIN

        admins = await list_admin_accounts(database_url=url)
        assert [a.email for a in admins] == ["karma@padmasambhavatrips.com"]

    def test_short_password_is_refused(self, monkeypatch, capsys):
        monkeypatch.setenv("ADMIN_PASSWORD", "short")

        code = create_admin(["create", "--name", "Karma", "--email", "karma@example.com"])

        assert code == 1
        assert "at least 8 characters" in capsys.readouterr().err
