from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Type
from pydantic import BaseModel, ValidationError
from models import AppState, LogEntry, Settings, Task
from paths import get_data_dir

logger = logging.getLogger(__name__)

STATE_FILE = "planner_state.json"


def state_path() -> Path:
    return get_data_dir() / STATE_FILE


def _backup_file(path: Path, content: bytes) -> None:
    try:
        backup = path.with_suffix(path.suffix + ".bak")
        backup.write_bytes(content)
    except OSError:
        # If backup fails we still continue with a reset
        logger.warning("Could not write backup for %s", path)


def _reset_file(path: Path, raw: bytes) -> None:
    _backup_file(path, raw)
    save_json(path, {})


def load_json(path: Path | str) -> Any:
    """
    Load JSON from path with safety:
    - If missing or unreadable: return {}
    - If empty, not UTF-8 or invalid JSON: write .bak and reset to {}
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        raw = path.read_bytes()
    except OSError:
        logger.exception("Could not read %s", path)
        return {}

    try:
        text = raw.decode("utf-8").strip()
    except UnicodeDecodeError:
        logger.error("State in %s is not UTF-8, starting from defaults", path)
        _reset_file(path, raw)
        return {}

    if not text:
        _reset_file(path, raw)
        return {}

    try:
        return json.loads(text)
    except ValueError:
        logger.error("Malformed state in %s, starting from defaults", path)
        _reset_file(path, raw)
        return {}


def save_json(path: Path | str, payload: Any) -> None:
    """
    Atomic JSON write: write to temp file then replace target.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp = path.with_suffix(path.suffix + ".tmp")
    temp.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    temp.replace(path)


def _load_items(raw: Any, model: Type[BaseModel], label: str) -> List[Any] | None:
    if not isinstance(raw, list):
        return None
    items = []
    for entry in raw:
        try:
            items.append(model.model_validate(entry))
        except ValidationError:
            logger.warning("Dropping invalid %s entry: %r", label, entry)
    return items


def _merge_settings(raw: Any) -> Settings:
    """Merge stored settings over the defaults; each invalid field keeps its default."""
    defaults = Settings()
    if not isinstance(raw, dict):
        return defaults
    merged: Dict[str, Any] = defaults.model_dump()
    for name in Settings.model_fields:
        if name not in raw:
            continue
        try:
            Settings.model_validate({**merged, name: raw[name]})
        except ValidationError:
            logger.warning("Stored setting %s=%r is invalid, using default", name, raw[name])
            continue
        merged[name] = raw[name]
    return Settings.model_validate(merged)


def state_from_dict(data: Any) -> AppState:
    """
    Build AppState from a stored payload. Lists are taken only when they are
    lists, settings are merged over the defaults field by field, and anything
    else in the payload (view selection, active timer) is ignored.
    """
    state = AppState()
    if not isinstance(data, dict):
        if data:
            logger.error("Stored state is not an object, starting from defaults")
        return state

    tasks = _load_items(data.get("tasks"), Task, "task")
    if tasks is not None:
        state.tasks = tasks
    logs = _load_items(data.get("logs"), LogEntry, "log")
    if logs is not None:
        state.logs = logs
    state.settings = _merge_settings(data.get("settings"))
    return state


def load_state(path: Path | str | None = None) -> AppState:
    path = Path(path) if path is not None else state_path()
    state = state_from_dict(load_json(path))
    logger.info("Loaded %d tasks and %d logs from %s", len(state.tasks), len(state.logs), path)
    return state


def save_state(state: AppState, path: Path | str | None = None) -> None:
    path = Path(path) if path is not None else state_path()
    save_json(path, state.model_dump(mode="json"))
