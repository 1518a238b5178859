# File: src/taskflow/models/pomodoro_schemas.py
"""Pydantic schemas for the Pomodoro API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from taskflow.models.enums import PomodoroMode, PomodoroStatus


class PomodoroStart(BaseModel):
    """Schema for starting a Pomodoro session."""

    mode: PomodoroMode
    duration: int = Field(..., gt=0, description="Planned length in seconds")
    task_id: UUID | None = Field(None, description="Optional task this session works on")


class SessionSnapshot(BaseModel):
    """A session as seen at one instant.

    For a running session `elapsed` and `remaining_time` are computed live from
    `start_time`; the stored row is not touched.
    """

    id: UUID
    mode: PomodoroMode
    status: PomodoroStatus
    duration: int
    elapsed: int
    remaining_time: int
    start_time: datetime
    end_time: datetime | None = None
    task_id: UUID | None = None
    is_running: bool

    model_config = ConfigDict(from_attributes=True)


class PomodoroHistoryItem(BaseModel):
    """A past or current session with its task, for the history list."""

    id: UUID
    mode: PomodoroMode
    status: PomodoroStatus
    duration: int
    elapsed: int
    start_time: datetime
    end_time: datetime | None = None
    task_id: UUID | None = None
    task_title: str | None = None
    task_status: str | None = None

    model_config = ConfigDict(from_attributes=True)
