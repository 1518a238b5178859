"""Health check endpoint for monitoring and orchestration.

Reports uptime, database reachability and how many Pomodoro sessions are
currently open (running or paused) across all users.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.db import get_db
from taskflow.core.logging import get_logger
from taskflow.models.enums import ACTIVE_STATUSES, PomodoroStatus
from taskflow.models.pomodoro_session import PomodoroSession

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Set in lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_sessions(db: AsyncSession) -> dict[str, Any]:
    """Count open Pomodoro sessions by status.

    A successful count also proves the database answers, so this doubles as
    the connectivity check. Returns {"status": "ok"|"down", "response_time_ms",
    "running", "paused"} or, when down, {"status", "response_time_ms", "error"}.
    """
    started = time.monotonic()
    stmt = (
        select(PomodoroSession.status, func.count())
        .where(PomodoroSession.status.in_(ACTIVE_STATUSES))
        .group_by(PomodoroSession.status)
    )
    try:
        rows = (await db.execute(stmt)).all()
    except Exception as e:
        logger.warning("health.database_down", error_type=type(e).__name__)
        return {
            "status": "down",
            "response_time_ms": int((time.monotonic() - started) * 1000),
            "error": type(e).__name__,
        }

    counts = {status_value: count for status_value, count in rows}
    return {
        "status": "ok",
        "response_time_ms": int((time.monotonic() - started) * 1000),
        "running": counts.get(PomodoroStatus.RUNNING.value, 0),
        "paused": counts.get(PomodoroStatus.PAUSED.value, 0),
    }


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Uptime, database status and open Pomodoro session counts. Always 200.",
)
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Example response (healthy):
        {
            "status": "ok",
            "uptime_seconds": 3600,
            "checks": {
                "database": {"status": "ok", "response_time_ms": 5},
                "pomodoro": {"running": 3, "paused": 1}
            }
        }

    When the database is down, "pomodoro" is null and status is "degraded".
    """
    sessions = await check_sessions(db)
    ok = sessions["status"] == "ok"

    database = {key: sessions[key] for key in ("status", "response_time_ms", "error") if key in sessions}
    pomodoro = {"running": sessions["running"], "paused": sessions["paused"]} if ok else None

    return JSONResponse(
        content={
            "status": "ok" if ok else "degraded",
            "uptime_seconds": get_uptime_seconds(),
            "checks": {"database": database, "pomodoro": pomodoro},
        },
        status_code=status.HTTP_200_OK,
    )
