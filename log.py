from __future__ import annotations
import logging
import os
from typing import Optional
from pathlib import Path
from paths import get_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_dir() -> Path:
    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _level_from_env() -> int:
    name = os.environ.get("STUDY_PLANNER_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(
    name: str = "",
    log_file: str = "planner.log",
    level: Optional[int] = None,
    console: bool = True,
) -> logging.Logger:
    """Configure and return a logger. Handlers are attached only once."""
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _level_from_env())

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        file_handler = logging.FileHandler(get_log_dir() / log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger
