from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Callable, List

import pytest

from models import AppState, Settings
from tasks import TaskStore


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "data"
    monkeypatch.setenv("STUDY_PLANNER_DATA_DIR", str(path))
    return path


@pytest.fixture()
def monday() -> dt.date:
    return dt.date(2026, 1, 5)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        exam_date=dt.date(2026, 4, 19),
        daily_target_minutes=45,
        start_date=dt.date(2026, 1, 1),
    )


@pytest.fixture()
def counter_ids() -> Callable[[], str]:
    counter = iter(range(1, 100_000))
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def saved() -> List[AppState]:
    return []


@pytest.fixture()
def store(settings: Settings, saved: List[AppState], counter_ids) -> TaskStore:
    return TaskStore(AppState(settings=settings), persist=saved.append, new_id=counter_ids)
