# File: src/taskflow/core/pomodoro.py
"""Pomodoro session store: state transitions and elapsed-time accounting.

Elapsed time is never taken from the client. Every transition and every read
recomputes it from `now - start_time` plus the seconds already banked in
`elapsed`, clamped to [0, duration]. A session stays correct even if the client
disappears mid-interval; the next pause/complete/read rebuilds it from
timestamps alone.

State machine:

    (none)  --start-->    running
    running --pause-->    paused
    paused  --resume-->   running
    running --complete--> completed
    paused  --complete--> completed

The one-active-session-per-user rule is a read-then-write check in
start_session. Two simultaneous starts from the same user can race; a single
person does not issue concurrent Pomodoro commands, so no locking is done.
"""

import functools
from datetime import datetime
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.activity import log_pomodoro_activity
from taskflow.core.errors import NotFoundError, StorageError, ValidationError
from taskflow.core.logging import get_logger
from taskflow.models.enums import (
    ACTIVE_STATUSES,
    ActivityAction,
    PomodoroMode,
    PomodoroStatus,
)
from taskflow.models.pomodoro_schemas import PomodoroHistoryItem, SessionSnapshot
from taskflow.models.pomodoro_session import PomodoroSession
from taskflow.models.task import Task
from taskflow.utils.datetime import now_utc, seconds_between

logger = get_logger(__name__)

T = TypeVar("T")


def _storage_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Surface database failures as StorageError."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error(
                "pomodoro.storage_error",
                operation=func.__name__,
                error=type(exc).__name__,
            )
            raise StorageError(
                "Could not persist Pomodoro session",
                details={"operation": func.__name__},
            ) from exc

    return wrapper


def compute_elapsed(banked: int, start_time: datetime, now: datetime, duration: int) -> int:
    """Banked seconds plus whole seconds since start_time, clamped to [0, duration]."""
    total = banked + seconds_between(start_time, now)
    return max(0, min(total, duration))


def current_elapsed(session: PomodoroSession, now: datetime) -> int:
    """Elapsed seconds as of `now`. Only a running session accrues time."""
    if session.status == PomodoroStatus.RUNNING.value:
        return compute_elapsed(session.elapsed, session.start_time, now, session.duration)
    return session.elapsed


def build_snapshot(session: PomodoroSession, now: datetime | None = None) -> SessionSnapshot:
    """Snapshot of a session at `now`, with live elapsed for a running session.

    Nothing is written back.
    """
    now = now or now_utc()
    elapsed = current_elapsed(session, now)
    return SessionSnapshot(
        id=session.id,
        mode=PomodoroMode(session.mode),
        status=PomodoroStatus(session.status),
        duration=session.duration,
        elapsed=elapsed,
        remaining_time=max(0, session.duration - elapsed),
        start_time=session.start_time,
        end_time=session.end_time,
        task_id=session.task_id,
        is_running=session.is_running,
    )


def _validate_start(mode: Any, duration: Any) -> PomodoroMode:
    try:
        parsed_mode = PomodoroMode(mode)
    except ValueError:
        raise ValidationError(
            "Mode must be one of: focus, break",
            details={"mode": str(mode)},
        )

    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise ValidationError(
            "Duration must be a positive number of seconds",
            details={"duration": str(duration)},
        )

    return parsed_mode


@_storage_errors
async def start_session(
    db: AsyncSession,
    user_id: UUID,
    mode: PomodoroMode | str,
    duration: int,
    task_id: UUID | None = None,
    now: datetime | None = None,
) -> SessionSnapshot:
    """Start a session, or return the user's active one unchanged.

    Raises:
        ValidationError: mode is not focus/break or duration is not a positive int
    """
    parsed_mode = _validate_start(mode, duration)
    now = now or now_utc()

    existing = await PomodoroSession.find_for_user(db, user_id, ACTIVE_STATUSES)
    if existing is not None:
        logger.info(
            "pomodoro.start_reused",
            session_id=str(existing.id),
            user_id=str(user_id),
            status=existing.status,
        )
        return build_snapshot(existing, now)

    session = PomodoroSession(
        user_id=user_id,
        mode=parsed_mode.value,
        status=PomodoroStatus.RUNNING.value,
        duration=duration,
        elapsed=0,
        start_time=now,
        task_id=task_id,
    )
    db.add(session)
    await db.flush()
    log_pomodoro_activity(db, session, ActivityAction.POMODORO_STARTED, now)
    await db.flush()
    await db.refresh(session)

    logger.info(
        "pomodoro.started",
        session_id=str(session.id),
        user_id=str(user_id),
        mode=session.mode,
        duration=duration,
    )
    return build_snapshot(session, now)


@_storage_errors
async def pause_session(
    db: AsyncSession,
    user_id: UUID,
    now: datetime | None = None,
) -> SessionSnapshot:
    """Bank the seconds run since start_time and pause.

    Raises:
        NotFoundError: the user has no running session
    """
    now = now or now_utc()
    session = await PomodoroSession.find_for_user(
        db, user_id, (PomodoroStatus.RUNNING.value,)
    )
    if session is None:
        raise NotFoundError("PomodoroSession", message="No running session found")

    session.elapsed = current_elapsed(session, now)
    session.status = PomodoroStatus.PAUSED.value
    log_pomodoro_activity(db, session, ActivityAction.POMODORO_PAUSED, now)
    await db.flush()
    await db.refresh(session)

    logger.info(
        "pomodoro.paused",
        session_id=str(session.id),
        user_id=str(user_id),
        elapsed=session.elapsed,
    )
    return build_snapshot(session, now)


@_storage_errors
async def resume_session(
    db: AsyncSession,
    user_id: UUID,
    now: datetime | None = None,
) -> SessionSnapshot:
    """Resume a paused session. start_time moves to now, elapsed is kept.

    Raises:
        NotFoundError: the user has no paused session
    """
    now = now or now_utc()
    session = await PomodoroSession.find_for_user(
        db, user_id, (PomodoroStatus.PAUSED.value,)
    )
    if session is None:
        raise NotFoundError("PomodoroSession", message="No paused session found")

    session.status = PomodoroStatus.RUNNING.value
    session.start_time = now
    log_pomodoro_activity(db, session, ActivityAction.POMODORO_RESUMED, now)
    await db.flush()
    await db.refresh(session)

    logger.info(
        "pomodoro.resumed",
        session_id=str(session.id),
        user_id=str(user_id),
        elapsed=session.elapsed,
    )
    return build_snapshot(session, now)


@_storage_errors
async def complete_session(
    db: AsyncSession,
    user_id: UUID,
    now: datetime | None = None,
) -> SessionSnapshot:
    """Finish the active session. Terminal.

    A running session folds its live delta into elapsed first; a paused one
    keeps what it has banked.

    Raises:
        NotFoundError: the user has no running or paused session
    """
    now = now or now_utc()
    session = await PomodoroSession.find_for_user(db, user_id, ACTIVE_STATUSES)
    if session is None:
        raise NotFoundError("PomodoroSession", message="No active session found")

    session.elapsed = current_elapsed(session, now)
    session.status = PomodoroStatus.COMPLETED.value
    session.end_time = now
    log_pomodoro_activity(db, session, ActivityAction.POMODORO_COMPLETED, now)
    await db.flush()
    await db.refresh(session)

    logger.info(
        "pomodoro.completed",
        session_id=str(session.id),
        user_id=str(user_id),
        elapsed=session.elapsed,
        duration=session.duration,
    )
    return build_snapshot(session, now)


@_storage_errors
async def get_current_session(
    db: AsyncSession,
    user_id: UUID,
    now: datetime | None = None,
) -> SessionSnapshot | None:
    """The user's running or paused session, or None. Read-only."""
    session = await PomodoroSession.find_for_user(db, user_id, ACTIVE_STATUSES)
    if session is None:
        return None
    return build_snapshot(session, now)


@_storage_errors
async def list_history(
    db: AsyncSession,
    user_id: UUID,
    limit: int = 20,
    offset: int = 0,
) -> list[PomodoroHistoryItem]:
    """The user's sessions, newest first, with the linked task's title and status."""
    stmt = (
        select(PomodoroSession, Task.title, Task.status)
        .outerjoin(Task, Task.id == PomodoroSession.task_id)
        .where(PomodoroSession.user_id == user_id)
        .order_by(PomodoroSession.start_time.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)

    items = []
    for session, task_title, task_status in result.all():
        items.append(
            PomodoroHistoryItem(
                id=session.id,
                mode=PomodoroMode(session.mode),
                status=PomodoroStatus(session.status),
                duration=session.duration,
                elapsed=session.elapsed,
                start_time=session.start_time,
                end_time=session.end_time,
                task_id=session.task_id,
                task_title=task_title,
                task_status=task_status,
            )
        )
    return items
