from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from models import Settings
from tasks import TaskStore


def _create(store: TaskStore, day: dt.date, title: str = "Read chapter 6", **overrides):
    fields = dict(
        day=day,
        title=title,
        category="Technology",
        kind="input",
        duration_minutes=30,
        priority="medium",
    )
    fields.update(overrides)
    return store.create(**fields)


def test_create_assigns_id_and_todo_status(store: TaskStore, saved, monday: dt.date):
    task = _create(store, monday, title="  Read chapter 6  ")

    assert task.id == "id-1"
    assert task.status == "todo"
    assert task.source == "manual"
    assert task.title == "Read chapter 6"
    assert store.find("id-1") is task
    assert len(saved) == 1


def test_create_rejects_empty_title(store: TaskStore, saved, monday: dt.date):
    with pytest.raises(ValueError, match="Title"):
        _create(store, monday, title="   ")
    assert store.tasks == []
    assert saved == []


def test_negative_duration_is_rejected(store: TaskStore, monday: dt.date):
    with pytest.raises(ValidationError):
        _create(store, monday, duration_minutes=-5)


def test_update_merges_fields(store: TaskStore, monday: dt.date):
    task = _create(store, monday)

    store.update(task.id, title="Networks", duration_minutes=45, day=monday + dt.timedelta(days=2))

    assert task.title == "Networks"
    assert task.duration_minutes == 45
    assert task.day == monday + dt.timedelta(days=2)
    assert task.id == "id-1"


def test_update_rejects_bad_values_without_mutation(store: TaskStore, saved, monday: dt.date):
    task = _create(store, monday)
    saved.clear()

    with pytest.raises(ValueError):
        store.update(task.id, title="")
    with pytest.raises(ValidationError):
        store.update(task.id, priority="urgent")

    assert task.title == "Read chapter 6"
    assert task.priority == "medium"
    assert saved == []


def test_update_unknown_task(store: TaskStore):
    with pytest.raises(KeyError):
        store.update("missing", title="x")


def test_delete_leaves_logs_dangling(store: TaskStore, monday: dt.date):
    task = _create(store, monday)
    store.add_log(task.id, 20, monday)

    store.delete(task.id)
    store.delete("missing")

    assert store.find(task.id) is None
    assert [log.task_id for log in store.logs] == [task.id]


def test_toggle_status(store: TaskStore, monday: dt.date):
    task = _create(store, monday)

    store.toggle_status(task.id)
    assert task.status == "completed"
    store.toggle_status(task.id)
    assert task.status == "todo"


def test_queries(store: TaskStore, monday: dt.date):
    tuesday = monday + dt.timedelta(days=1)
    a = _create(store, tuesday, title="Input A")
    b = _create(store, monday, title="Drill B", kind="past-exam", category="Past Exams")
    c = _create(store, monday, title="Review C", kind="review")
    store.set_status(c.id, "completed")

    assert store.filter_by_date(monday) == [b, c]
    assert store.filter_by_status("completed") == [c]
    assert store.filter_by_sheet("input") == [a]
    assert store.filter_by_sheet("output") == [b, c]
    assert store.filter_by_sheet("output", store.pending()) == [b]
    assert store.pending() == [b, a]
    with pytest.raises(ValueError):
        store.filter_by_sheet("everything")


def test_regenerate_and_rollover_persist(store: TaskStore, saved, settings: Settings, monday: dt.date):
    manual = _create(store, monday - dt.timedelta(days=1))
    saved.clear()

    created = store.regenerate(settings, monday)
    assert created == len(store.tasks) - 1
    assert store.tasks[0] is manual
    assert len(saved) == 1

    assert store.rollover(monday) == 1
    assert len(saved) == 2
    assert store.rollover(monday) == 0
    assert len(saved) == 2


def test_bring_forward_persists_only_when_moved(store: TaskStore, saved, monday: dt.date):
    assert store.bring_tomorrow_forward(monday).outcome == "empty"
    assert saved == []

    task = _create(store, monday + dt.timedelta(days=1))
    saved.clear()
    result = store.bring_tomorrow_forward(monday)

    assert result.outcome == "moved"
    assert task.day == monday
    assert len(saved) == 1


def test_study_labelled_title_goes_to_input_sheet(store: TaskStore, monday: dt.date):
    labelled = _create(store, monday, title="[Study] Networks recap", kind="review")
    drill = _create(store, monday, title="Networks drill", kind="past-exam")

    assert store.filter_by_sheet("input") == [labelled]
    assert store.filter_by_sheet("output") == [drill]
