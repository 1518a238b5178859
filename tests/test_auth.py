"""Tests for authentication endpoints."""

import base64
import json

import pytest
from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher
from sqlalchemy import select
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.db import get_db
from taskflow.core.security import check_login_password, hash_password, verify_password
from taskflow.main import create_app
from taskflow.models.user import User
from tests.factories import UserFactory


class TestAuthEndpoints:
    """Test authentication endpoints and middleware."""

    @pytest.mark.asyncio
    async def test_protected_route_requires_auth(self, unauthenticated_client: AsyncClient):
        """Test that protected routes require authentication."""
        response = await unauthenticated_client.get("/auth/me")

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authenticated"}

    @pytest.mark.asyncio
    async def test_login_success_sets_session(self, unauthenticated_client: AsyncClient, test_user):
        """Test successful login returns the user and a session cookie."""
        response = await unauthenticated_client.post(
            "/login",
            data={"username": "testclient@example.com", "password": "testpass123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "testclient@example.com"
        assert data["display_name"] == "Test Client"
        assert "hashed_password" not in data
        assert "session" in response.cookies

    @pytest.mark.asyncio
    async def test_login_session_holds_only_user_id(
        self, unauthenticated_client: AsyncClient, test_user
    ):
        response = await unauthenticated_client.post(
            "/login",
            data={"username": "testclient@example.com", "password": "testpass123"},
        )

        payload = response.cookies["session"].split(".")[0]
        assert json.loads(base64.b64decode(payload)) == {"user_id": str(test_user.id)}

    @pytest.mark.asyncio
    async def test_session_persistence(self, unauthenticated_client: AsyncClient, test_user):
        """Test that session cookies persist across requests."""
        await unauthenticated_client.post(
            "/login",
            data={"username": "testclient@example.com", "password": "testpass123"},
        )

        response = await unauthenticated_client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["id"] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive_on_email(
        self, unauthenticated_client: AsyncClient, test_user
    ):
        response = await unauthenticated_client.post(
            "/login",
            data={"username": "  TestClient@Example.com ", "password": "testpass123"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, unauthenticated_client: AsyncClient, test_user):
        """Test login with a wrong password returns 401."""
        response = await unauthenticated_client.post(
            "/login",
            data={"username": "testclient@example.com", "password": "wrongpass1"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/login",
            data={"username": "nobody@example.com", "password": "testpass123"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_disabled_account(self, db_session: AsyncSession):
        """Test that an inactive user cannot log in."""
        await UserFactory.create(
            db_session,
            email="disabled@example.com",
            hashed_password=hash_password("testpass123"),
            is_active=False,
        )
        app = create_app()

        async def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db

        async with AsyncClient(
                transport=ASGITransport(app=app),
                base_url="http://test"
        ) as ac:
            response = await ac.post(
                "/login",
                data={"username": "disabled@example.com", "password": "testpass123"},
            )

        assert response.status_code == 401
        assert response.json()["message"] == "Account is disabled"

    @pytest.mark.asyncio
    async def test_logout_clears_session(self, unauthenticated_client: AsyncClient, test_user):
        """Test that logout ends the session."""
        await unauthenticated_client.post(
            "/login",
            data={"username": "testclient@example.com", "password": "testpass123"},
        )

        logout = await unauthenticated_client.post("/logout")
        me = await unauthenticated_client.get("/auth/me")

        assert logout.status_code == 204
        assert me.status_code == 401

    @pytest.mark.asyncio
    async def test_tampered_session_cookie_is_rejected(self, unauthenticated_client: AsyncClient):
        unauthenticated_client.cookies.set("session", "not-a-signed-cookie")

        response = await unauthenticated_client.get("/auth/me")

        assert response.status_code == 401


class TestPasswordHashing:
    """Test pwdlib password helpers."""

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse 1")

        assert hashed != "correct horse 1"
        assert verify_password("correct horse 1", hashed)
        assert not verify_password("wrong horse 1", hashed)

    def test_check_login_password_current_hash_needs_no_update(self):
        valid, rehashed = check_login_password("correct horse 1", hash_password("correct horse 1"))

        assert valid is True
        assert rehashed is None

    def test_check_login_password_rejects_wrong_password(self):
        valid, rehashed = check_login_password("wrong horse 1", hash_password("correct horse 1"))

        assert valid is False
        assert rehashed is None


class TestPasswordRehashOnLogin:
    """Hashes made with weaker Argon2 parameters are upgraded on login."""

    @pytest.mark.asyncio
    async def test_outdated_hash_is_replaced(self, db_session: AsyncSession):
        weak = PasswordHash((Argon2Hasher(time_cost=1, memory_cost=8192),))
        old_hash = weak.hash("testpass123")
        user = await UserFactory.create(
            db_session, email="legacy@example.com", hashed_password=old_hash
        )
        app = create_app()

        async def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db

        async with AsyncClient(
                transport=ASGITransport(app=app),
                base_url="http://test"
        ) as ac:
            response = await ac.post(
                "/login",
                data={"username": "legacy@example.com", "password": "testpass123"},
            )

        assert response.status_code == 200
        result = await db_session.execute(select(User).where(User.id == user.id))
        stored = result.scalar_one()
        assert stored.hashed_password != old_hash
        assert verify_password("testpass123", stored.hashed_password)
