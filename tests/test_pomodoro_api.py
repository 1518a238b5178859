"""Tests for the /pomodoro endpoints."""

import uuid

import pytest
from httpx import AsyncClient

from tests.factories import PomodoroSessionFactory, TaskFactory


class TestStartEndpoint:
    """POST /pomodoro/start"""

    @pytest.mark.asyncio
    async def test_start_returns_snapshot(self, client: AsyncClient, clock):
        response = await client.post("/pomodoro/start", json={"mode": "focus", "duration": 1500})

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "focus"
        assert data["status"] == "running"
        assert data["duration"] == 1500
        assert data["elapsed"] == 0
        assert data["remaining_time"] == 1500
        assert data["is_running"] is True
        assert data["end_time"] is None
        assert data["task_id"] is None
        uuid.UUID(data["id"])

    @pytest.mark.asyncio
    async def test_start_with_task(self, client: AsyncClient, clock):
        task = await TaskFactory.create(client.db_session, user_id=client.test_user.id)

        response = await client.post(
            "/pomodoro/start",
            json={"mode": "focus", "duration": 1500, "task_id": str(task.id)},
        )

        assert response.status_code == 200
        assert response.json()["task_id"] == str(task.id)

    @pytest.mark.asyncio
    async def test_start_with_unknown_task_id_is_accepted(self, client: AsyncClient, clock):
        """The task link is advisory; it is not checked against existing tasks."""
        missing = str(uuid.uuid4())

        response = await client.post(
            "/pomodoro/start",
            json={"mode": "break", "duration": 300, "task_id": missing},
        )

        assert response.status_code == 200
        assert response.json()["task_id"] == missing

    @pytest.mark.asyncio
    async def test_second_start_returns_same_session(self, client: AsyncClient, clock):
        first = await client.post("/pomodoro/start", json={"mode": "focus", "duration": 1500})
        clock.advance(30)
        second = await client.post("/pomodoro/start", json={"mode": "break", "duration": 300})

        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["mode"] == "focus"
        assert second.json()["elapsed"] == 30

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"mode": "focus", "duration": 0},
            {"mode": "focus", "duration": -1},
            {"mode": "nap", "duration": 1500},
            {"mode": "focus"},
            {"duration": 1500},
            {"mode": "focus", "duration": 1500, "task_id": "not-a-uuid"},
        ],
    )
    async def test_start_rejects_invalid_payload(self, client: AsyncClient, payload):
        response = await client.post("/pomodoro/start", json=payload)

        assert response.status_code == 422

        current = await client.get("/pomodoro/current")
        assert current.json() is None


class TestTransitionEndpoints:
    """POST /pomodoro/pause, /resume, /complete"""

    @pytest.mark.asyncio
    async def test_pause_resume_complete_cycle(self, client: AsyncClient, clock):
        await client.post("/pomodoro/start", json={"mode": "focus", "duration": 1500})

        clock.advance(100)
        paused = await client.post("/pomodoro/pause")
        assert paused.status_code == 200
        assert paused.json()["status"] == "paused"
        assert paused.json()["elapsed"] == 100
        assert paused.json()["is_running"] is False

        clock.advance(600)
        resumed = await client.post("/pomodoro/resume")
        assert resumed.status_code == 200
        assert resumed.json()["status"] == "running"
        assert resumed.json()["elapsed"] == 100
        assert resumed.json()["remaining_time"] == 1400

        clock.advance(50)
        completed = await client.post("/pomodoro/complete")
        assert completed.status_code == 200
        data = completed.json()
        assert data["status"] == "completed"
        assert data["elapsed"] == 150
        assert data["end_time"] is not None

    @pytest.mark.asyncio
    async def test_pause_without_session_returns_404(self, client: AsyncClient):
        response = await client.post("/pomodoro/pause")

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "NOT_FOUND"
        assert data["message"] == "No running session found"
        assert data["details"] == {"resource": "PomodoroSession"}

    @pytest.mark.asyncio
    async def test_resume_without_paused_session_returns_404(self, client: AsyncClient, clock):
        await client.post("/pomodoro/start", json={"mode": "focus", "duration": 1500})

        response = await client.post("/pomodoro/resume")

        assert response.status_code == 404
        assert response.json()["message"] == "No paused session found"

    @pytest.mark.asyncio
    async def test_complete_without_session_returns_404(self, client: AsyncClient):
        response = await client.post("/pomodoro/complete")

        assert response.status_code == 404
        assert response.json()["message"] == "No active session found"


class TestCurrentEndpoint:
    """GET /pomodoro/current"""

    @pytest.mark.asyncio
    async def test_current_is_null_without_session(self, client: AsyncClient):
        response = await client.get("/pomodoro/current")

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_current_reports_live_remaining_time(self, client: AsyncClient, clock):
        await client.post("/pomodoro/start", json={"mode": "focus", "duration": 1500})
        clock.advance(125.9)

        response = await client.get("/pomodoro/current")

        data = response.json()
        assert data["elapsed"] == 125
        assert data["remaining_time"] == 1375
        assert data["is_running"] is True

    @pytest.mark.asyncio
    async def test_current_clamps_after_running_out(self, client: AsyncClient, clock):
        await client.post("/pomodoro/start", json={"mode": "break", "duration": 300})
        clock.advance(7200)

        data = (await client.get("/pomodoro/current")).json()

        assert data["status"] == "running"
        assert data["elapsed"] == 300
        assert data["remaining_time"] == 0


class TestHistoryEndpoint:
    """GET /pomodoro/history"""

    @pytest.mark.asyncio
    async def test_history_lists_sessions_with_task(self, client: AsyncClient):
        task = await TaskFactory.create(
            client.db_session, user_id=client.test_user.id, title="Read paper"
        )
        await PomodoroSessionFactory.create(
            client.db_session, client.test_user.id, task_id=task.id, elapsed=1500
        )

        response = await client.get("/pomodoro/history")

        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["task_title"] == "Read paper"
        assert items[0]["task_status"] == "todo"
        assert items[0]["status"] == "completed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["limit=0", "limit=101", "offset=-1"])
    async def test_history_rejects_bad_paging(self, client: AsyncClient, query):
        response = await client.get(f"/pomodoro/history?{query}")

        assert response.status_code == 422


class TestAuthRequired:
    """Pomodoro endpoints need a logged-in user."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/pomodoro/start"),
            ("POST", "/pomodoro/pause"),
            ("POST", "/pomodoro/resume"),
            ("POST", "/pomodoro/complete"),
            ("GET", "/pomodoro/current"),
            ("GET", "/pomodoro/history"),
        ],
    )
    async def test_requires_login(self, unauthenticated_client: AsyncClient, method, path):
        response = await unauthenticated_client.request(
            method, path, json={"mode": "focus", "duration": 1500} if method == "POST" else None
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authenticated"}
