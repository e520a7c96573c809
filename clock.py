from __future__ import annotations
import math
from datetime import date, datetime, timedelta


def today(now: datetime | None = None) -> date:
    """Calendar date of `now` (local time), time-of-day dropped."""
    return (now or datetime.now()).date()


def tomorrow(day: date) -> date:
    return day + timedelta(days=1)


def days_until_exam(exam_date: date, now: datetime | None = None) -> int:
    # Countdown rounds partial days up, never below zero
    now = now or datetime.now()
    exam_start = datetime.combine(exam_date, datetime.min.time())
    seconds = (exam_start - now).total_seconds()
    return max(0, math.ceil(seconds / 86400))
