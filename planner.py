from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, List, Sequence
from uuid import uuid4
from models import Settings, Task
from syllabus import (
    DRILL_TITLE,
    INPUT_PREFIX,
    SYLLABUS,
    WRITTEN_DRILL_PREFIX,
    Chapter,
)

logger = logging.getLogger(__name__)

MAX_PLAN_DAYS = 180
CARRY_OVER_PREFIX = "[Carried over] "
SUNDAY = 6  # date.weekday()

WRITTEN_DRILL_MINUTES = 45
DRILL_MINUTES = 15
FULL_INPUT_MINUTES = 30
SHORT_INPUT_MINUTES = 15


def _input_minutes(daily_target: int) -> int:
    return FULL_INPUT_MINUTES if daily_target >= 45 else SHORT_INPUT_MINUTES


def _keep_on_regenerate(t: Task) -> bool:
    return t.source == "manual" or t.status == "completed"


def _tasks_for_day(
    d: date,
    chapter: Chapter,
    daily_target: int,
    new_id: Callable[[], str],
) -> List[Task]:
    if d.weekday() == SUNDAY:
        return [Task(
            id=new_id(),
            title=WRITTEN_DRILL_PREFIX + chapter.name,
            category=chapter.category,
            kind="past-exam",
            day=d,
            duration_minutes=WRITTEN_DRILL_MINUTES,
            priority="high",
            source="plan",
        )]

    input_minutes = _input_minutes(daily_target)
    out = [Task(
        id=new_id(),
        title=INPUT_PREFIX + chapter.name,
        category=chapter.category,
        kind="input",
        day=d,
        duration_minutes=input_minutes,
        priority="medium",
        source="plan",
    )]
    if daily_target - input_minutes >= DRILL_MINUTES:
        out.append(Task(
            id=new_id(),
            title=DRILL_TITLE,
            category="Past Exams",
            kind="past-exam",
            day=d,
            duration_minutes=DRILL_MINUTES,
            priority="low",
            source="plan",
        ))
    return out


def generate_plan(
    settings: Settings,
    today: date,
    syllabus: Sequence[Chapter] = SYLLABUS,
    existing: Iterable[Task] = (),
    new_id: Callable[[], str] = lambda: str(uuid4()),
) -> List[Task]:
    """
    Lay out the syllabus one chapter per week from tomorrow up to the day
    before the exam (at most MAX_PLAN_DAYS days).

    Manually created and completed tasks from `existing` are kept; the
    remaining generated tasks are replaced.
    """
    if not syllabus:
        raise ValueError("Syllabus is empty.")

    kept = [t for t in existing if _keep_on_regenerate(t)]
    new_tasks: List[Task] = []

    start = today + timedelta(days=1)
    day_count = 0
    current = start
    while current < settings.exam_date and day_count < MAX_PLAN_DAYS:
        chapter = syllabus[(day_count // 7) % len(syllabus)]
        new_tasks.extend(
            _tasks_for_day(current, chapter, settings.daily_target_minutes, new_id)
        )
        current = current + timedelta(days=1)
        day_count += 1

    logger.info(
        "Generated %d tasks over %d days (kept %d existing)",
        len(new_tasks), day_count, len(kept),
    )
    return kept + new_tasks


def rollover_tasks(tasks: Iterable[Task], today: date) -> int:
    """Move unfinished past-dated tasks to today. Returns how many moved."""
    moved = 0
    for t in tasks:
        if t.status == "completed" or t.day >= today:
            continue
        t.day = today
        if not t.title.startswith(CARRY_OVER_PREFIX):
            t.title = CARRY_OVER_PREFIX + t.title
        moved += 1
    if moved:
        logger.info("Carried over %d overdue tasks to %s", moved, today.isoformat())
    return moved


@dataclass
class ForwardResult:
    outcome: str  # "moved" or "empty"
    moved: int = 0

    @property
    def message(self) -> str:
        if self.outcome == "empty":
            return "There is no plan for tomorrow. Regenerate your plan from Settings."
        return f"Moved {self.moved} task(s) from tomorrow to today."


def bring_tomorrow_forward(tasks: Iterable[Task], today: date) -> ForwardResult:
    tmr = today + timedelta(days=1)
    candidates = [t for t in tasks if t.day == tmr]
    if not candidates:
        return ForwardResult(outcome="empty")
    for t in candidates:
        t.day = today
    return ForwardResult(outcome="moved", moved=len(candidates))
