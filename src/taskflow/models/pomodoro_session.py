# File: src/taskflow/models/pomodoro_session.py
"""PomodoroSession model: one focus/break interval and its time accounting."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Uuid, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from taskflow.core.db import Base
from taskflow.models.enums import PomodoroStatus
from taskflow.utils.datetime import now_utc


class PomodoroSession(Base):
    """Pomodoro session model.

    At most one session per user is RUNNING or PAUSED. That is enforced by the
    start operation (read-then-write), not by a database constraint.
    """

    __tablename__ = "pomodoro_sessions"
    __table_args__ = (
        CheckConstraint("mode IN ('focus', 'break')", name="ck_pomodoro_sessions_mode"),
        CheckConstraint(
            "status IN ('running', 'paused', 'completed')",
            name="ck_pomodoro_sessions_status",
        ),
        CheckConstraint(
            "elapsed >= 0 AND elapsed <= duration",
            name="ck_pomodoro_sessions_elapsed_range",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    mode: Mapped[str] = mapped_column(String(10), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PomodoroStatus.RUNNING.value,
        index=True,
    )

    # Seconds
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    elapsed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Most recent transition into RUNNING
    start_time: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)

    # Advisory link: not checked against tasks, cleared when the task is deleted
    task_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    @property
    def is_running(self) -> bool:
        return self.status == PomodoroStatus.RUNNING.value

    @staticmethod
    async def find_for_user(
        db: AsyncSession,
        user_id: uuid.UUID,
        statuses: tuple[str, ...],
    ) -> "PomodoroSession | None":
        """Most recent session for the user whose status is one of `statuses`.

        Args:
            db: Database session
            user_id: Owner of the session
            statuses: Accepted status values

        Returns:
            The newest matching session, or None
        """
        stmt = (
            select(PomodoroSession)
            .where(
                PomodoroSession.user_id == user_id,
                PomodoroSession.status.in_(statuses),
            )
            .order_by(PomodoroSession.start_time.desc())
            .limit(1)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    def __repr__(self) -> str:
        return (
            f"<PomodoroSession(id={self.id}, user_id={self.user_id}, "
            f"mode={self.mode}, status={self.status}, elapsed={self.elapsed}/{self.duration})>"
        )
