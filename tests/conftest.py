"""
Shared fixtures: an in-memory SQLite database, the ASGI app wired to it,
and an admin account with a valid token.
"""

import os

# Settings are read once at import time, so configure them before the app loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-booking-suite"
os.environ["ENVIRONMENT"] = "test"

from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from padmasambhava_trips.database import create_session_factory, get_db
from padmasambhava_trips.main import app
from padmasambhava_trips.models import Admin, AdminRole, Base
from padmasambhava_trips.services.admin_service import AdminService
from padmasambhava_trips.utils.auth import create_access_token

ADMIN_EMAIL = "admin@padmasambhavatrips.com"
ADMIN_PASSWORD = "himalaya-2024"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin(session_factory) -> Admin:
    async with session_factory() as session:
        return await AdminService(session).create_admin(
            name="Tenzin Dorje",
            email=ADMIN_EMAIL,
            password=ADMIN_PASSWORD,
            role=AdminRole.SUPER_ADMIN,
        )


@pytest.fixture
def admin_token(admin) -> str:
    return create_access_token({"sub": str(admin.id), "role": admin.role.value})


@pytest.fixture
def auth_headers(admin_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def booking_payload():
    """Build a valid booking form submission, with overrides."""

    def build(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "tripId": "665f1c2ab7e4a1d2c3f4a5b6",
            "tripName": "Kailash Mansarovar Yatra",
            "customerName": "Pema Lhamo",
            "email": "pema@example.com",
            "phone": "+91 98765 43210",
            "message": "Vegetarian meals please",
            "travelers": 2,
            "selectedDate": "2025-06-14",
            "selectedPrice": 1850.0,
            "totalAmount": 3700.0,
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def create_booking(client, booking_payload):
    """POST a booking through the public endpoint and return the booking body."""

    async def create(**overrides: Any) -> Dict[str, Any]:
        response = await client.post("/api/v1/bookings", json=booking_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["data"]["booking"]

    return create
