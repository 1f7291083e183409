"""Tests for admin authentication: login, logout, profile and token checks."""

import uuid
from datetime import timedelta

import pytest
from jose import jwt
from sqlalchemy import delete, update

from padmasambhava_trips.models import Admin, AdminRole
from padmasambhava_trips.services.admin_service import AdminService
from padmasambhava_trips.utils.auth import check_credential, create_access_token
from padmasambhava_trips.utils.exceptions import DuplicateKeyError

from .conftest import ADMIN_EMAIL, ADMIN_PASSWORD

LOGIN = "/api/v1/auth/login"
LOGOUT = "/api/v1/auth/logout"
ME = "/api/v1/auth/me"


async def _deactivate(session_factory, admin_id):
    async with session_factory() as session:
        await session.execute(update(Admin).where(Admin.id == admin_id).values(is_active=False))
        await session.commit()


class TestLogin:

    async def test_login_returns_token_and_cookie(self, client, admin):
        response = await client.post(LOGIN, json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["token"]

        profile = body["data"]["admin"]
        assert profile["email"] == ADMIN_EMAIL
        assert profile["role"] == "super-admin"
        assert profile["isActive"] is True
        assert "password" not in profile and "passwordHash" not in profile

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("jwt=")
        assert "httponly" in set_cookie.lower()

        assert check_credential(body["token"]).admin_id == str(admin.id)

    async def test_login_email_is_case_insensitive(self, client, admin):
        response = await client.post(
            LOGIN, json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "email, password",
        [(ADMIN_EMAIL, "wrong-password"), ("nobody@padmasambhavatrips.com", ADMIN_PASSWORD)],
    )
    async def test_bad_credentials(self, client, admin, email, password):
        response = await client.post(LOGIN, json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json() == {"status": "fail", "message": "Incorrect email or password"}

    async def test_inactive_admin_cannot_log_in(self, client, admin, session_factory):
        await _deactivate(session_factory, admin.id)

        response = await client.post(LOGIN, json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert response.status_code == 403
        assert response.json()["message"] == "Your account has been deactivated"

    async def test_missing_password(self, client):
        response = await client.post(LOGIN, json={"email": ADMIN_EMAIL})

        assert response.status_code == 400
        assert "password" in response.json()["message"]


class TestCurrentAdmin:

    async def test_me_with_bearer_token(self, client, admin, auth_headers):
        response = await client.get(ME, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["admin"]["id"] == str(admin.id)

    async def test_me_with_cookie(self, client, admin, admin_token):
        response = await client.get(ME, headers={"Cookie": f"jwt={admin_token}"})

        assert response.status_code == 200
        assert response.json()["data"]["admin"]["name"] == "Tenzin Dorje"

    async def test_bearer_header_wins_over_cookie(self, client, admin, admin_token):
        response = await client.get(
            ME,
            headers={"Authorization": f"Bearer {admin_token}", "Cookie": "jwt=garbage"},
        )
        assert response.status_code == 200

    async def test_expired_token(self, client, admin):
        token = create_access_token({"sub": str(admin.id)}, expires_delta=timedelta(minutes=-1))

        response = await client.get(ME, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Your token has expired. Please log in again."

    async def test_deleted_admin(self, client, admin, auth_headers, session_factory):
        async with session_factory() as session:
            await session.execute(delete(Admin).where(Admin.id == admin.id))
            await session.commit()

        response = await client.get(ME, headers=auth_headers)

        assert response.status_code == 401
        assert response.json()["message"] == "The admin belonging to this token no longer exists."

    async def test_deactivated_admin_token(self, client, admin, auth_headers, session_factory):
        await _deactivate(session_factory, admin.id)

        response = await client.get(ME, headers=auth_headers)

        assert response.status_code == 403

    async def test_token_with_malformed_subject(self, client):
        token = create_access_token({"sub": "not-a-uuid"})

        response = await client.get(ME, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestLogout:

    async def test_logout_clears_cookie(self, client, admin, auth_headers):
        response = await client.post(LOGOUT, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Logged out successfully"}

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("jwt=")
        assert "max-age=0" in set_cookie.lower()

    async def test_logout_requires_authentication(self, client):
        assert (await client.post(LOGOUT)).status_code == 401


class TestCheckCredential:

    def test_missing_credential(self):
        result = check_credential(None)
        assert not result.authenticated
        assert result.reason == "You are not logged in! Please log in to get access."

    def test_garbage_credential(self):
        result = check_credential("abc.def.ghi")
        assert not result.authenticated
        assert result.reason == "Invalid token. Please log in again."

    def test_foreign_signature(self):
        token = jwt.encode({"sub": str(uuid.uuid4())}, "some-other-secret", algorithm="HS256")
        assert not check_credential(token).authenticated

    def test_token_without_subject(self):
        token = create_access_token({"role": "admin"})
        assert not check_credential(token).authenticated

    def test_valid_credential(self):
        admin_id = str(uuid.uuid4())
        result = check_credential(create_access_token({"sub": admin_id, "role": "admin"}))

        assert result.authenticated
        assert result.admin_id == admin_id
        assert result.role == "admin"
        assert result.reason is None


class TestAdminService:

    async def test_duplicate_email_is_rejected(self, db_session, admin):
        with pytest.raises(DuplicateKeyError):
            await AdminService(db_session).create_admin(
                name="Someone Else", email=ADMIN_EMAIL.upper(), password="another-password"
            )

    async def test_new_admins_default_to_admin_role(self, db_session):
        created = await AdminService(db_session).create_admin(
            name="Nima", email=" Nima@PadmasambhavaTrips.com ", password="prayer-flags"
        )

        assert created.role == AdminRole.ADMIN
        assert created.email == "nima@padmasambhavatrips.com"
        assert created.password_hash != "prayer-flags"
        assert created.verify_password("prayer-flags")

    async def test_changed_password_replaces_the_old_one(self, db_session, admin, client):
        stored = await AdminService(db_session).get_admin_by_id(admin.id)
        stored.set_password("new-himalaya-2025")
        await db_session.commit()

        old = await client.post(LOGIN, json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        new = await client.post(LOGIN, json={"email": ADMIN_EMAIL, "password": "new-himalaya-2025"})

        assert old.status_code == 401
        assert new.status_code == 200
