# File: src/taskflow/client/reconciler.py
"""Client-side Pomodoro countdown reconciled against the session store.

The countdown ticks locally once a second without calling the server. On every
transition (start, pause, resume, reset, mode switch) and on load, the store's
snapshot replaces local state wholesale; local and server values are never
merged.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol
from uuid import UUID

from taskflow.core.errors import NotFoundError
from taskflow.core.logging import get_logger
from taskflow.models.enums import DEFAULT_DURATIONS, PomodoroMode, PomodoroStatus
from taskflow.models.pomodoro_schemas import SessionSnapshot

logger = get_logger(__name__)


class SessionStore(Protocol):
    """What the reconciler needs from the server. PomodoroAPIClient satisfies it."""

    async def start(
        self, mode: PomodoroMode | str, duration: int, task_id: UUID | None = None
    ) -> SessionSnapshot: ...

    async def pause(self) -> SessionSnapshot: ...

    async def resume(self) -> SessionSnapshot: ...

    async def complete(self) -> SessionSnapshot: ...

    async def get_current(self) -> SessionSnapshot | None: ...


class LocalStatus(str, enum.Enum):
    """Countdown state as shown to the user. IDLE means no active session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class TimerState:
    mode: PomodoroMode
    status: LocalStatus
    remaining_time: int
    total_duration: int
    session_id: UUID | None = None
    last_tick_timestamp: float | None = None

    @property
    def is_running(self) -> bool:
        return self.status is LocalStatus.RUNNING


class TickTimer:
    """A single repeating asyncio task calling `callback` every `interval` seconds.

    One owner, one task. start() cancels any previous task before creating a
    new one, cancel() is synchronous, and leaving `async with` always cancels.
    A callback may cancel its own timer; the loop then ends after the callback
    returns instead of being interrupted mid-call.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float = 1.0):
        self._callback = callback
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._run())

    def cancel(self) -> asyncio.Task | None:
        """Cancel the loop without waiting. Returns the task that was cancelled."""
        task, self._task = self._task, None
        if task is None or task is asyncio.current_task():
            return None
        task.cancel()
        return task

    async def aclose(self) -> None:
        """Cancel the loop and wait until its task has finished."""
        task = self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def __aenter__(self) -> TickTimer:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _run(self) -> None:
        me = asyncio.current_task()
        try:
            while self._task is me:
                await asyncio.sleep(self.interval)
                if self._task is not me:
                    break
                await self._callback()
        except Exception:
            logger.exception("timer.tick_failed")
        finally:
            if self._task is me:
                self._task = None


class TimerReconciler:
    """Local Pomodoro countdown kept consistent with the session store.

    Args:
        store: The server-side session store (usually a PomodoroAPIClient)
        clock: Wall-clock seconds, `time.time` by default
        tick_interval: Seconds between local ticks
        durations: Default length per mode, in seconds
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        clock: Callable[[], float] = time.time,
        tick_interval: float = 1.0,
        durations: dict[PomodoroMode, int] | None = None,
    ):
        self._store = store
        self._clock = clock
        self._durations = {**DEFAULT_DURATIONS, **(durations or {})}
        self._timer = TickTimer(self.tick, interval=tick_interval)
        # Bumped on every state replacement; a completion that awaited across
        # a newer replacement must not overwrite it
        self._generation = 0
        self.state = self._idle_state(PomodoroMode.FOCUS)

    async def __aenter__(self) -> TimerReconciler:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def close(self) -> None:
        """Stop ticking without waiting for the tick task to finish."""
        self._timer.cancel()

    async def aclose(self) -> None:
        """Stop ticking and wait for the tick task. Call on shutdown."""
        await self._timer.aclose()

    @property
    def state(self) -> TimerState:
        return self._state

    @state.setter
    def state(self, value: TimerState) -> None:
        self._state = value
        self._generation += 1

    @property
    def ticking(self) -> bool:
        return self._timer.running

    @property
    def progress(self) -> float:
        """Share of the interval already spent, 0-100."""
        total = self.state.total_duration
        if total <= 0:
            return 0.0
        spent = (total - self.state.remaining_time) / total * 100
        return min(100.0, max(0.0, spent))

    @staticmethod
    def format_time(seconds: int) -> str:
        """Render seconds as mm:ss."""
        minutes, secs = divmod(max(0, int(seconds)), 60)
        return f"{minutes:02d}:{secs:02d}"

    async def load(self) -> TimerState:
        """Seed local state from the store's current session, if there is one."""
        snapshot = await self._store.get_current()
        if snapshot is not None:
            await self._adopt(snapshot)
        return self.state

    async def start(self, task_id: UUID | None = None) -> TimerState:
        """Start a session in the current mode with its full duration."""
        snapshot = await self._call(
            "start",
            self._store.start(self.state.mode, self.state.total_duration, task_id),
        )
        if snapshot is not None:
            await self._adopt(snapshot)
        return self.state

    async def pause(self) -> TimerState:
        if self.state.session_id is None:
            return self.state
        snapshot = await self._call("pause", self._store.pause())
        if snapshot is not None:
            await self._adopt(snapshot)
        return self.state

    async def resume(self) -> TimerState:
        if self.state.session_id is None:
            return self.state
        snapshot = await self._call("resume", self._store.resume())
        if snapshot is not None:
            await self._adopt(snapshot)
        return self.state

    async def reset(self) -> TimerState:
        """Complete the current session and go back to an idle focus interval."""
        await self._complete_then_idle(PomodoroMode.FOCUS)
        return self.state

    async def switch_mode(self, mode: PomodoroMode | str) -> TimerState:
        """Complete the current session, if any, and go idle in `mode`."""
        await self._complete_then_idle(PomodoroMode(mode))
        return self.state

    async def tick(self) -> None:
        """Advance the countdown by the whole seconds since the last tick.

        Leftover fractions stay in `last_tick_timestamp`, so late or dropped
        ticks do not make the countdown drift.
        """
        if not self.state.is_running:
            return

        now = self._clock()
        last = self.state.last_tick_timestamp
        if last is None:
            last = now
        passed = int(now - last)

        if passed > 0:
            self.state.remaining_time = max(0, self.state.remaining_time - passed)
            self.state.last_tick_timestamp = last + passed
        else:
            self.state.last_tick_timestamp = last

        if self.state.remaining_time <= 0:
            await self._finish_interval()

    async def _finish_interval(self) -> None:
        """Countdown hit zero: complete server-side and move to the next mode."""
        self._timer.cancel()
        finished = self.state.mode
        generation = self._generation
        try:
            await self._call("complete", self._store.complete())
        finally:
            settled = self._settle_idle(generation, finished.next)
        if settled:
            logger.info(
                "reconciler.interval_finished",
                mode=finished.value,
                next_mode=finished.next.value,
            )

    async def _complete_then_idle(self, mode: PomodoroMode) -> None:
        self._timer.cancel()
        generation = self._generation
        try:
            if self.state.session_id is not None:
                await self._call("complete", self._store.complete())
        finally:
            self._settle_idle(generation, mode)

    def _settle_idle(self, generation: int, mode: PomodoroMode) -> bool:
        """Go idle in `mode` unless the state was replaced while completing.

        A newer snapshot adopted during the await (a start or resume that
        raced the completion) stays in place together with its timer.
        """
        if self._generation != generation:
            logger.info("reconciler.stale_completion", mode=mode.value)
            return False
        self.state = self._idle_state(mode)
        self._timer.cancel()
        return True

    async def _adopt(self, snapshot: SessionSnapshot) -> None:
        """Replace local state with the server's snapshot."""
        running = snapshot.status is PomodoroStatus.RUNNING
        if running:
            status = LocalStatus.RUNNING
        elif snapshot.status is PomodoroStatus.PAUSED:
            status = LocalStatus.PAUSED
        else:
            status = LocalStatus.IDLE

        self.state = TimerState(
            mode=snapshot.mode,
            status=status,
            remaining_time=max(0, snapshot.remaining_time),
            total_duration=snapshot.duration,
            session_id=snapshot.id if status is not LocalStatus.IDLE else None,
            last_tick_timestamp=self._clock() if running else None,
        )

        if not running:
            self._timer.cancel()
        elif self.state.remaining_time == 0:
            # Ran out while nobody was watching
            await self._finish_interval()
        else:
            self._timer.start()

    async def _call(self, operation: str, call: Awaitable[SessionSnapshot]) -> SessionSnapshot | None:
        """Await a store call. NotFoundError is logged and turned into None."""
        try:
            return await call
        except NotFoundError as exc:
            logger.warning("reconciler.not_found", operation=operation, message=exc.message)
            return None

    def _idle_state(self, mode: PomodoroMode) -> TimerState:
        duration = self._durations[mode]
        return TimerState(
            mode=mode,
            status=LocalStatus.IDLE,
            remaining_time=duration,
            total_duration=duration,
        )
