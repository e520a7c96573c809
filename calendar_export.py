from __future__ import annotations
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Tuple
from zoneinfo import ZoneInfo
from icalendar import Calendar, Event as IcsEvent
from models import Task, Settings


def _get_timezone() -> ZoneInfo | None:
    local = datetime.now().astimezone().tzinfo
    if isinstance(local, ZoneInfo):
        return local
    # Floating local times when the zone has no IANA name
    return None


def tasks_to_ics(tasks: List[Task], settings: Settings) -> Tuple[bytes, List[str]]:
    """
    Export tasks as timed events. Each day's tasks are packed back to back
    from the preferred start hour; anything that would run past midnight is
    skipped with a warning.
    """
    cal = Calendar()
    cal.add("PRODID", "-//Exam Study Planner//Local//")
    cal.add("version", "2.0")
    cal.add("X-WR-CALNAME", "Exam Study Plan")

    warnings: List[str] = []
    tz = _get_timezone()
    cursor_by_day: Dict[date, datetime] = {}

    ordered = sorted(tasks, key=lambda x: (x.day, x.kind != "input", x.title.lower()))
    for task in ordered:
        if task.duration_minutes <= 0:
            continue
        day_start = datetime.combine(task.day, time(hour=settings.preferred_start_hour), tzinfo=tz)
        day_end = datetime.combine(task.day + timedelta(days=1), time.min, tzinfo=tz)
        start_time = cursor_by_day.get(task.day, day_start)
        end_time = start_time + timedelta(minutes=task.duration_minutes)
        if end_time > day_end:
            warnings.append(
                f"{task.title} on {task.day.isoformat()} does not fit before midnight and was skipped."
            )
            continue

        summary = task.title
        if task.status == "completed":
            summary += " (done)"

        event = IcsEvent()
        event.add("uid", f"{task.id}@exam-study-planner")
        event.add("summary", summary)
        event.add("dtstart", start_time)
        event.add("dtend", end_time)
        event.add("categories", [task.category])
        event.add(
            "description",
            f"{task.duration_minutes} minutes, {task.kind}, priority {task.priority}.",
        )
        cal.add_component(event)
        cursor_by_day[task.day] = end_time

    return cal.to_ical(), warnings
