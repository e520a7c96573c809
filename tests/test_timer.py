from __future__ import annotations

import datetime as dt

import pytest

from tasks import TaskStore
from timer import SessionTimer, TimerStateError, format_clock

T0 = dt.datetime(2026, 1, 5, 9, 0, 0)


def _at(minutes: float = 0, seconds: float = 0) -> dt.datetime:
    return T0 + dt.timedelta(minutes=minutes, seconds=seconds)


@pytest.fixture()
def task(store: TaskStore, monday: dt.date):
    return store.create(
        day=monday,
        title="Databases",
        category="Technology",
        kind="input",
        duration_minutes=30,
    )


@pytest.fixture()
def timer(store: TaskStore) -> SessionTimer:
    return SessionTimer(store)


def test_state_machine(timer: SessionTimer, task):
    assert timer.state == "idle"
    timer.start(task.id, now=T0)
    assert timer.state == "running"
    timer.pause(now=_at(1))
    assert timer.state == "paused"
    timer.resume(now=_at(2))
    assert timer.state == "running"
    timer.stop(now=_at(3))
    assert timer.state == "idle"
    assert timer.session is None


def test_invalid_transitions(timer: SessionTimer, task):
    with pytest.raises(TimerStateError):
        timer.pause(now=T0)
    with pytest.raises(TimerStateError):
        timer.resume(now=T0)
    with pytest.raises(TimerStateError):
        timer.stop(now=T0)

    timer.start(task.id, now=T0)
    with pytest.raises(TimerStateError):
        timer.resume(now=_at(1))
    timer.pause(now=_at(1))
    with pytest.raises(TimerStateError):
        timer.pause(now=_at(2))


def test_start_requires_existing_task(timer: SessionTimer):
    with pytest.raises(KeyError):
        timer.start("missing", now=T0)
    assert timer.state == "idle"


def test_start_replaces_running_session(timer: SessionTimer, store: TaskStore, task, monday):
    other = store.create(
        day=monday, title="Networks", category="Technology", kind="input", duration_minutes=30
    )
    timer.start(task.id, now=T0)
    timer.start(other.id, now=_at(5))

    assert timer.session.task_id == other.id
    assert timer.elapsed_seconds(now=_at(6)) == 60


def test_elapsed_is_monotonic_and_frozen_while_paused(timer: SessionTimer, task):
    timer.start(task.id, now=T0)
    readings = [timer.elapsed_seconds(now=_at(seconds=s)) for s in (0, 0.5, 1, 30, 61)]
    assert readings == sorted(readings)
    assert readings == [0, 0, 1, 30, 61]

    timer.pause(now=_at(2))
    assert timer.elapsed_seconds(now=_at(2)) == 120
    assert timer.elapsed_seconds(now=_at(50)) == 120

    timer.resume(now=_at(10))
    assert timer.elapsed_seconds(now=_at(11)) == 180


def test_elapsed_never_negative(timer: SessionTimer, task):
    timer.start(task.id, now=T0)
    assert timer.elapsed_seconds(now=_at(-5)) == 0


def test_display_reads_do_not_change_session(timer: SessionTimer, task):
    session = timer.start(task.id, now=T0)
    timer.pause(now=_at(1))
    before = (session.start, session.total_paused, session.pause_start)
    for s in range(5):
        timer.elapsed_seconds(now=_at(seconds=60 + s))
    assert (session.start, session.total_paused, session.pause_start) == before


def test_stop_arithmetic_with_pause(timer: SessionTimer, store: TaskStore, task, monday):
    timer.start(task.id, now=T0)
    timer.pause(now=_at(5))
    timer.resume(now=_at(8))

    result = timer.stop(now=_at(20, seconds=1), today=monday)

    # 20m01s minus a 3 minute pause, rounded up
    assert result.elapsed_minutes == 18
    assert store.logs[-1].duration_minutes == 18


def test_stop_partial_progress_reduces_remaining_time(timer: SessionTimer, store: TaskStore, task, monday):
    timer.start(task.id, now=T0)

    result = timer.stop(now=_at(20), today=monday)

    assert result.outcome == "partial"
    assert result.elapsed_minutes == 20
    assert result.remaining_minutes == 10
    assert task.duration_minutes == 10
    assert task.status == "todo"
    [log] = store.logs
    assert (log.task_id, log.duration_minutes, log.day) == (task.id, 20, monday)


def test_stop_goal_reached_leaves_task_untouched(timer: SessionTimer, store: TaskStore, task, monday):
    timer.start(task.id, now=T0)

    result = timer.stop(now=_at(35), today=monday)

    assert result.outcome == "goal_reached"
    assert result.elapsed_minutes == 35
    assert task.duration_minutes == 30
    assert task.status == "todo"
    assert [log.duration_minutes for log in store.logs] == [35]
    assert "Goal reached" in result.message


def test_stop_while_paused_uses_pause_start(timer: SessionTimer, task, monday):
    timer.start(task.id, now=T0)
    timer.pause(now=_at(10))

    result = timer.stop(now=_at(90), today=monday)

    assert result.elapsed_minutes == 10
    assert task.duration_minutes == 20


def test_stop_without_elapsed_time_records_nothing(timer: SessionTimer, store: TaskStore, task, saved):
    timer.start(task.id, now=T0)
    saved.clear()

    result = timer.stop(now=T0)

    assert result.outcome == "nothing_recorded"
    assert store.logs == []
    assert task.duration_minutes == 30
    assert saved == []
    assert timer.state == "idle"


def test_stop_after_task_deleted_still_logs(timer: SessionTimer, store: TaskStore, task, monday):
    timer.start(task.id, now=T0)
    store.delete(task.id)

    result = timer.stop(now=_at(5), today=monday)

    assert result.outcome == "goal_reached"
    assert [log.task_id for log in store.logs] == [task.id]


def test_format_clock():
    assert format_clock(0) == "00:00"
    assert format_clock(75) == "01:15"
    assert format_clock(-3) == "00:00"
