"""Pomodoro session endpoints (start, pause, resume, complete, current, history)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.api.auth import get_current_user
from taskflow.core import pomodoro
from taskflow.core.db import get_db
from taskflow.models import PomodoroHistoryItem, PomodoroStart, SessionSnapshot, User

router = APIRouter(prefix="/pomodoro", tags=["pomodoro"])


@router.post("/start", response_model=SessionSnapshot)
async def start(
    payload: PomodoroStart,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Start a session. Returns the active one unchanged if it already exists."""
    return await pomodoro.start_session(
        db,
        current_user.id,
        payload.mode,
        payload.duration,
        payload.task_id,
    )


@router.post("/pause", response_model=SessionSnapshot)
async def pause(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Pause the running session."""
    return await pomodoro.pause_session(db, current_user.id)


@router.post("/resume", response_model=SessionSnapshot)
async def resume(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Resume the paused session."""
    return await pomodoro.resume_session(db, current_user.id)


@router.post("/complete", response_model=SessionSnapshot)
async def complete(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Complete the running or paused session."""
    return await pomodoro.complete_session(db, current_user.id)


@router.get("/current", response_model=SessionSnapshot | None)
async def current(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Active session with live elapsed/remaining time, or null."""
    return await pomodoro.get_current_session(db, current_user.id)


@router.get("/history", response_model=list[PomodoroHistoryItem])
async def history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Past and current sessions, newest first."""
    return await pomodoro.list_history(db, current_user.id, limit=limit, offset=offset)
