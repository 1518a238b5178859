"""Tests for the health check endpoint."""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.api.health import get_uptime_seconds, set_app_start_time
from taskflow.core.db import get_db
from taskflow.main import create_app
from tests.factories import PomodoroSessionFactory, UserFactory


@pytest_asyncio.fixture
async def client(db_session: AsyncSession):
    """Create a test client for the FastAPI app with database dependency override."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


class FailingSession:
    """Stand-in session whose every query fails."""

    async def execute(self, *args, **kwargs):
        raise ConnectionRefusedError("database unreachable")


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_200_when_db_ok(self, client: AsyncClient) -> None:
        """Test that /health returns 200 with ok status when DB is healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["checks"]["database"]["status"] == "ok"

    @pytest.mark.asyncio
    async def test_health_endpoint_includes_response_time(self, client: AsyncClient) -> None:
        """Test that database check includes response time in milliseconds."""
        response = await client.get("/health")

        db_check = response.json()["checks"]["database"]
        assert isinstance(db_check["response_time_ms"], int)
        assert db_check["response_time_ms"] >= 0

    @pytest.mark.asyncio
    async def test_health_with_no_sessions_reports_zero(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.json()["checks"]["pomodoro"] == {"running": 0, "paused": 0}

    @pytest.mark.asyncio
    async def test_health_counts_open_sessions_across_users(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        """Only running and paused sessions are counted, whoever owns them."""
        alice = await UserFactory.create(db_session, email="alice@example.com")
        bob = await UserFactory.create(db_session, email="bob@example.com")
        await PomodoroSessionFactory.create(db_session, user_id=alice.id, status="running")
        await PomodoroSessionFactory.create(db_session, user_id=bob.id, status="paused")
        await PomodoroSessionFactory.create(db_session, user_id=alice.id, status="completed")
        await PomodoroSessionFactory.create(db_session, user_id=bob.id, status="completed")

        response = await client.get("/health")

        data = response.json()
        assert data["status"] == "ok"
        assert data["checks"]["pomodoro"] == {"running": 1, "paused": 1}

    @pytest.mark.asyncio
    async def test_health_endpoint_does_not_require_login(self, unauthenticated_client) -> None:
        response = await unauthenticated_client.get("/health")

        assert response.status_code == 200

    def test_health_endpoint_uptime_tracking(self) -> None:
        """Test that uptime increases over time."""
        one_hour_ago = datetime.now() - timedelta(hours=1)
        set_app_start_time(one_hour_ago)

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610, f"Expected ~3600 seconds, got {uptime}"


class TestHealthCheckDegradedStates:
    """Test health check behavior when dependencies fail."""

    @pytest.mark.asyncio
    async def test_health_returns_degraded_when_db_fails(self) -> None:
        """A failing database still gets a 200, with status degraded."""
        app = create_app()

        async def failing_db():
            yield FailingSession()

        app.dependency_overrides[get_db] = failing_db

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test"
        ) as ac:
            response = await ac.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"]["status"] == "down"
        assert data["checks"]["database"]["error"] == "ConnectionRefusedError"
        assert data["checks"]["pomodoro"] is None
