from __future__ import annotations
import logging
from datetime import date
from typing import Callable, List, Optional
from uuid import uuid4
from models import AppState, LogEntry, Settings, Task
from planner import ForwardResult, bring_tomorrow_forward, generate_plan, rollover_tasks
from syllabus import STUDY_LABEL

logger = logging.getLogger(__name__)

SHEETS = ("input", "output")


def is_input_task(task: Task) -> bool:
    # Tasks titled with the study label count as input even when typed otherwise
    return task.kind == "input" or STUDY_LABEL in task.title


class TaskStore:
    """
    Task and study-log collections of one AppState.
    Every mutation calls `persist(state)` afterwards.
    """

    def __init__(
        self,
        state: AppState,
        persist: Optional[Callable[[AppState], None]] = None,
        new_id: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.state = state
        self._persist = persist
        self._new_id = new_id

    @property
    def tasks(self) -> List[Task]:
        return self.state.tasks

    @property
    def logs(self) -> List[LogEntry]:
        return self.state.logs

    def flush(self) -> None:
        if self._persist is not None:
            self._persist(self.state)

    # --- queries ---

    def find(self, task_id: str) -> Task | None:
        for t in self.state.tasks:
            if t.id == task_id:
                return t
        return None

    def filter_by_date(self, day: date) -> List[Task]:
        return [t for t in self.state.tasks if t.day == day]

    def filter_by_status(self, status: str) -> List[Task]:
        return [t for t in self.state.tasks if t.status == status]

    def filter_by_sheet(self, sheet: str, tasks: List[Task] | None = None) -> List[Task]:
        if sheet not in SHEETS:
            raise ValueError(f"Unknown sheet: {sheet!r}")
        source = self.state.tasks if tasks is None else tasks
        want_input = sheet == "input"
        return [t for t in source if is_input_task(t) == want_input]

    def pending(self) -> List[Task]:
        open_tasks = [t for t in self.state.tasks if t.status != "completed"]
        return sorted(open_tasks, key=lambda t: t.day)

    # --- mutations ---

    def create(
        self,
        day: date,
        title: str,
        category: str,
        kind: str,
        duration_minutes: int,
        priority: str = "medium",
        source: str = "manual",
    ) -> Task:
        title = title.strip()
        if not title:
            raise ValueError("Title is required.")
        task = Task(
            id=self._new_id(),
            title=title,
            category=category,
            kind=kind,
            day=day,
            duration_minutes=int(duration_minutes),
            priority=priority,
            status="todo",
            source=source,
        )
        self.state.tasks.append(task)
        self.flush()
        return task

    def update(self, task_id: str, **fields) -> Task:
        task = self.find(task_id)
        if task is None:
            raise KeyError(task_id)
        if "id" in fields:
            raise ValueError("Task id cannot be changed.")
        if "title" in fields:
            fields["title"] = str(fields["title"] or "").strip()
            if not fields["title"]:
                raise ValueError("Title is required.")

        # Validate the merged task before touching the stored one
        merged = Task.model_validate({**task.model_dump(), **fields})
        for name in fields:
            setattr(task, name, getattr(merged, name))
        self.flush()
        return task

    def delete(self, task_id: str) -> None:
        # Log entries keep pointing at the removed id
        before = len(self.state.tasks)
        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
        if len(self.state.tasks) != before:
            logger.info("Deleted task %s", task_id)
            self.flush()

    def set_status(self, task_id: str, status: str) -> Task:
        return self.update(task_id, status=status)

    def toggle_status(self, task_id: str) -> Task:
        task = self.find(task_id)
        if task is None:
            raise KeyError(task_id)
        new_status = "todo" if task.status == "completed" else "completed"
        return self.update(task_id, status=new_status)

    def add_log(self, task_id: str | None, minutes: int, day: date) -> LogEntry:
        entry = LogEntry(
            id=self._new_id(),
            task_id=task_id,
            duration_minutes=minutes,
            day=day,
        )
        self.state.logs.append(entry)
        self.flush()
        return entry

    # --- plan-level operations ---

    def regenerate(self, settings: Settings, today: date) -> int:
        """Rebuild the generated plan. Returns the number of new tasks."""
        old_ids = {t.id for t in self.state.tasks}
        self.state.tasks = generate_plan(
            settings, today, existing=self.state.tasks, new_id=self._new_id
        )
        self.flush()
        return sum(1 for t in self.state.tasks if t.id not in old_ids)

    def rollover(self, today: date) -> int:
        moved = rollover_tasks(self.state.tasks, today)
        if moved:
            self.flush()
        return moved

    def bring_tomorrow_forward(self, today: date) -> ForwardResult:
        result = bring_tomorrow_forward(self.state.tasks, today)
        if result.outcome == "moved":
            self.flush()
        return result
