from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from tasks import TaskStore

logger = logging.getLogger(__name__)


class TimerStateError(RuntimeError):
    pass


@dataclass
class ActiveSession:
    task_id: str
    start: datetime
    total_paused: timedelta = timedelta(0)
    is_paused: bool = False
    pause_start: Optional[datetime] = None


@dataclass
class StopResult:
    outcome: str  # "goal_reached", "partial" or "nothing_recorded"
    task_id: str
    elapsed_minutes: int = 0
    remaining_minutes: int = 0

    @property
    def message(self) -> str:
        if self.outcome == "goal_reached":
            return f"Studied {self.elapsed_minutes} min. Goal reached!"
        if self.outcome == "partial":
            return (
                f"Studied {self.elapsed_minutes} min. "
                f"{self.remaining_minutes} min left on this task."
            )
        return "No study time elapsed, nothing recorded."


def format_clock(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


class SessionTimer:
    """
    Pause/resume stopwatch for one task at a time.

    The session lives only in memory. Stopping writes the log entry and the
    remaining-time correction back through the TaskStore.
    """

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self.session: Optional[ActiveSession] = None

    @property
    def state(self) -> str:
        if self.session is None:
            return "idle"
        return "paused" if self.session.is_paused else "running"

    def start(self, task_id: str, now: datetime | None = None) -> ActiveSession:
        if self.store.find(task_id) is None:
            raise KeyError(task_id)
        if self.session is not None:
            logger.warning(
                "Replacing unfinished session for task %s", self.session.task_id
            )
        self.session = ActiveSession(task_id=task_id, start=now or datetime.now())
        logger.info("Timer started for task %s", task_id)
        return self.session

    def pause(self, now: datetime | None = None) -> None:
        if self.state != "running":
            raise TimerStateError(f"Cannot pause while {self.state}.")
        self.session.is_paused = True
        self.session.pause_start = now or datetime.now()

    def resume(self, now: datetime | None = None) -> None:
        if self.state != "paused":
            raise TimerStateError(f"Cannot resume while {self.state}.")
        now = now or datetime.now()
        self.session.total_paused += max(timedelta(0), now - self.session.pause_start)
        self.session.is_paused = False
        self.session.pause_start = None

    def toggle(self, now: datetime | None = None) -> str:
        if self.state == "paused":
            self.resume(now)
        else:
            self.pause(now)
        return self.state

    def _elapsed(self, now: datetime | None) -> timedelta:
        s = self.session
        effective_now = s.pause_start if s.is_paused else (now or datetime.now())
        return max(timedelta(0), effective_now - s.start - s.total_paused)

    def elapsed_seconds(self, now: datetime | None = None) -> int:
        # Read-only: safe to call from the display refresh
        if self.session is None:
            return 0
        return int(self._elapsed(now).total_seconds())

    def stop(self, now: datetime | None = None, today: date | None = None) -> StopResult:
        if self.session is None:
            raise TimerStateError("No active session.")
        session = self.session
        elapsed = self._elapsed(now)
        today = today or (now or datetime.now()).date()
        self.session = None

        elapsed_minutes = math.ceil(elapsed / timedelta(minutes=1))
        if elapsed_minutes <= 0:
            logger.info("Session for task %s had no elapsed time, not logged", session.task_id)
            return StopResult(outcome="nothing_recorded", task_id=session.task_id)

        self.store.add_log(session.task_id, elapsed_minutes, today)
        task = self.store.find(session.task_id)
        target = task.duration_minutes if task is not None else 0
        remaining = target - elapsed_minutes

        if remaining <= 0:
            outcome = "goal_reached"
            remaining = 0
        else:
            outcome = "partial"
            self.store.update(task.id, duration_minutes=remaining)

        logger.info(
            "Session for task %s stopped: %d min, %s", session.task_id, elapsed_minutes, outcome
        )
        return StopResult(
            outcome=outcome,
            task_id=session.task_id,
            elapsed_minutes=elapsed_minutes,
            remaining_minutes=remaining,
        )
