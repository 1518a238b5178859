"""Pydantic schemas for tasks and the activity log."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskflow.models.enums import TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus = TaskStatus.TODO

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Title cannot be empty")
        return cleaned


class TaskRead(BaseModel):
    """Schema for reading a task."""

    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityRead(BaseModel):
    """Schema for one activity log entry."""

    id: UUID
    task_id: UUID | None
    action: str
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
