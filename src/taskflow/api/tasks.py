"""Task endpoints (create, list, delete).

Only what Pomodoro sessions need to reference a task.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.api.auth import get_current_user
from taskflow.core.db import get_db
from taskflow.core.errors import NotFoundError
from taskflow.core.logging import get_logger
from taskflow.models import Activity, PomodoroSession, Task, TaskCreate, TaskRead, User

logger = get_logger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a task for the current user."""
    task = Task(
        user_id=current_user.id,
        title=payload.title,
        description=payload.description,
        status=payload.status.value,
    )
    db.add(task)
    await db.flush()
    await db.refresh(task)

    logger.info("task.created", task_id=str(task.id), user_id=str(current_user.id))
    return task


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's tasks, newest first."""
    stmt = (
        select(Task)
        .where(Task.user_id == current_user.id)
        .order_by(Task.created_at.desc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a task. Sessions and activities that referenced it keep existing, unlinked."""
    stmt = select(Task).where(Task.id == task_id, Task.user_id == current_user.id)
    result = await db.execute(stmt)
    task = result.scalar_one_or_none()

    if task is None:
        raise NotFoundError("Task", str(task_id))

    await db.execute(
        update(PomodoroSession)
        .where(PomodoroSession.task_id == task_id)
        .values(task_id=None)
    )
    await db.execute(
        update(Activity)
        .where(Activity.task_id == task_id)
        .values(task_id=None)
    )
    await db.delete(task)
    await db.flush()

    logger.info("task.deleted", task_id=str(task_id), user_id=str(current_user.id))
