"""Activity log utilities for tracking Pomodoro transitions."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.models.activity import Activity
from taskflow.models.enums import ActivityAction
from taskflow.models.pomodoro_session import PomodoroSession


def describe_transition(action: ActivityAction, session: PomodoroSession) -> str:
    """Human-readable line for an activity entry."""
    if action == ActivityAction.POMODORO_STARTED:
        return f"Started {session.mode} session for {session.duration} seconds"
    if action == ActivityAction.POMODORO_PAUSED:
        return f"Paused {session.mode} session at {session.elapsed} seconds"
    if action == ActivityAction.POMODORO_RESUMED:
        return f"Resumed {session.mode} session"
    return f"Completed {session.mode} session with {session.elapsed} seconds"


def log_pomodoro_activity(
    db: AsyncSession,
    session: PomodoroSession,
    action: ActivityAction,
    at: datetime,
) -> Activity:
    """Add an activity row for a transition to the current unit of work.

    Args:
        db: Database session
        session: The PomodoroSession after the transition was applied
        action: Which transition happened
        at: Timestamp of the transition (naive UTC)

    Returns:
        The pending Activity record (flushed together with the session)
    """
    activity = Activity(
        user_id=session.user_id,
        task_id=session.task_id,
        action=action.value,
        description=describe_transition(action, session),
        created_at=at,
    )
    db.add(activity)
    return activity
