from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List
from models import LogEntry, Task, UNCATEGORIZED


@dataclass
class StudyStats:
    total_minutes: int = 0
    today_minutes: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_day: Dict[date, int] = field(default_factory=dict)

    @property
    def total_hours(self) -> int:
        return self.total_minutes // 60


def minutes_by_category(logs: Iterable[LogEntry], tasks: Iterable[Task]) -> Dict[str, int]:
    category_of = {t.id: t.category for t in tasks}
    out: Dict[str, int] = {}
    for log in logs:
        cat = category_of.get(log.task_id, UNCATEGORIZED)
        out[cat] = out.get(cat, 0) + log.duration_minutes
    return out


def minutes_by_day(logs: Iterable[LogEntry]) -> Dict[date, int]:
    out: Dict[date, int] = {}
    for log in logs:
        out[log.day] = out.get(log.day, 0) + log.duration_minutes
    return dict(sorted(out.items()))


def compute_stats(logs: List[LogEntry], tasks: List[Task], today: date) -> StudyStats:
    return StudyStats(
        total_minutes=sum(log.duration_minutes for log in logs),
        today_minutes=sum(log.duration_minutes for log in logs if log.day == today),
        by_category=minutes_by_category(logs, tasks),
        by_day=minutes_by_day(logs),
    )
