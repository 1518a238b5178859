"""Client-side Pomodoro countdown and its HTTP transport."""

from taskflow.client.api_client import PomodoroAPIClient
from taskflow.client.reconciler import LocalStatus, TickTimer, TimerReconciler, TimerState

__all__ = [
    "LocalStatus",
    "PomodoroAPIClient",
    "TickTimer",
    "TimerReconciler",
    "TimerState",
]
