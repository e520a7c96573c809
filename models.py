from __future__ import annotations
from pydantic import BaseModel, Field
from datetime import date, timedelta
from typing import List, Literal, Optional


Category = Literal["Technology", "Management", "Strategy", "Afternoon Practice", "Past Exams"]
Kind = Literal["input", "past-exam", "review"]
Priority = Literal["low", "medium", "high"]
Status = Literal["todo", "completed"]
Source = Literal["plan", "manual"]

CATEGORIES: List[str] = ["Technology", "Management", "Strategy", "Afternoon Practice", "Past Exams"]
KINDS: List[str] = ["input", "past-exam", "review"]
PRIORITIES: List[str] = ["low", "medium", "high"]
UNCATEGORIZED = "Uncategorized"


def _default_exam_date() -> date:
    return date.today() + timedelta(weeks=26)


class Task(BaseModel):
    id: str
    title: str
    category: Category
    kind: Kind
    day: date
    duration_minutes: int = Field(ge=0)
    priority: Priority = "medium"
    status: Status = "todo"
    source: Source = "manual"


class LogEntry(BaseModel):
    id: str
    task_id: Optional[str] = None  # weak reference, task may be gone
    duration_minutes: int = Field(gt=0)
    day: date


class Settings(BaseModel):
    exam_date: date = Field(default_factory=_default_exam_date)
    daily_target_minutes: int = Field(ge=15, le=600, default=45)
    study_days_per_week: int = Field(ge=1, le=7, default=7)
    start_date: date = Field(default_factory=date.today)
    preferred_start_hour: int = Field(default=19, ge=0, le=23)


class AppState(BaseModel):
    settings: Settings = Field(default_factory=Settings)
    tasks: List[Task] = Field(default_factory=list)
    logs: List[LogEntry] = Field(default_factory=list)
