"""HTTP client for the Pomodoro endpoints.

Authentication rides on the session cookie set by /login, so one
`PomodoroAPIClient` per logged-in user.
"""

from typing import Any
from uuid import UUID

import httpx

from taskflow.core.errors import NotFoundError
from taskflow.core.logging import get_logger
from taskflow.models.enums import PomodoroMode
from taskflow.models.pomodoro_schemas import SessionSnapshot

logger = get_logger(__name__)


class PomodoroAPIClient:
    """Async client for /pomodoro/*.

    404 responses become NotFoundError so callers can treat "no session in the
    required state" as recoverable. Every other non-2xx status raises
    httpx.HTTPStatusError.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "PomodoroAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and keep the session cookie on this client."""
        response = await self._client.post(
            "/login",
            data={"username": email, "password": password},
        )
        response.raise_for_status()
        logger.info("client.logged_in", email=email)
        return response.json()

    async def start(
        self,
        mode: PomodoroMode | str,
        duration: int,
        task_id: UUID | None = None,
    ) -> SessionSnapshot:
        payload = {
            "mode": PomodoroMode(mode).value,
            "duration": duration,
            "task_id": str(task_id) if task_id else None,
        }
        data = await self._request("POST", "/pomodoro/start", json=payload)
        return SessionSnapshot.model_validate(data)

    async def pause(self) -> SessionSnapshot:
        data = await self._request("POST", "/pomodoro/pause")
        return SessionSnapshot.model_validate(data)

    async def resume(self) -> SessionSnapshot:
        data = await self._request("POST", "/pomodoro/resume")
        return SessionSnapshot.model_validate(data)

    async def complete(self) -> SessionSnapshot:
        data = await self._request("POST", "/pomodoro/complete")
        return SessionSnapshot.model_validate(data)

    async def get_current(self) -> SessionSnapshot | None:
        data = await self._request("GET", "/pomodoro/current")
        if data is None:
            return None
        return SessionSnapshot.model_validate(data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)

        if response.status_code == httpx.codes.NOT_FOUND:
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            raise NotFoundError("PomodoroSession", message=message or f"{path} not found")

        response.raise_for_status()
        return response.json()
