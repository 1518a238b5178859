"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class PomodoroMode(str, enum.Enum):
    """Kind of Pomodoro interval."""

    FOCUS = "focus"
    BREAK = "break"

    @property
    def next(self) -> "PomodoroMode":
        """Mode that follows this one once it runs out."""
        return PomodoroMode.BREAK if self is PomodoroMode.FOCUS else PomodoroMode.FOCUS


class PomodoroStatus(str, enum.Enum):
    """Session lifecycle states. COMPLETED is terminal."""

    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


ACTIVE_STATUSES = (PomodoroStatus.RUNNING.value, PomodoroStatus.PAUSED.value)

# Default planned lengths in seconds
DEFAULT_DURATIONS = {
    PomodoroMode.FOCUS: 25 * 60,
    PomodoroMode.BREAK: 5 * 60,
}


class TaskStatus(str, enum.Enum):
    """Task workflow states."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class ActivityAction(str, enum.Enum):
    """Activity log entries written by Pomodoro transitions."""

    POMODORO_STARTED = "pomodoro_started"
    POMODORO_PAUSED = "pomodoro_paused"
    POMODORO_RESUMED = "pomodoro_resumed"
    POMODORO_COMPLETED = "pomodoro_completed"
