"""Domain models package."""

from taskflow.models.activity import Activity
from taskflow.models.enums import (
    ActivityAction,
    PomodoroMode,
    PomodoroStatus,
    TaskStatus,
)
from taskflow.models.pomodoro_schemas import (
    PomodoroHistoryItem,
    PomodoroStart,
    SessionSnapshot,
)
from taskflow.models.pomodoro_session import PomodoroSession
from taskflow.models.task import Task
from taskflow.models.task_schemas import ActivityRead, TaskCreate, TaskRead
from taskflow.models.user import User
from taskflow.models.user_schemas import UserCreate, UserResponse

__all__ = [
    "Activity",
    "ActivityAction",
    "ActivityRead",
    "PomodoroHistoryItem",
    "PomodoroMode",
    "PomodoroSession",
    "PomodoroStart",
    "PomodoroStatus",
    "SessionSnapshot",
    "Task",
    "TaskCreate",
    "TaskRead",
    "TaskStatus",
    "User",
    "UserCreate",
    "UserResponse",
]
