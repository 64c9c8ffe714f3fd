# src/power_tasks/tasks/task_file.py

"""
Save/load task lists to a JSON file (best-effort).

Neither function raises: a failed save returns False and a failed load
returns an empty list. Details go to the log.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .task_codec import DecodeResult, decode_tasks_report, encode_tasks
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = "tasks.json"


def resolve_path(path: str | Path | None) -> Path:
    """Default file for None/blank; `~` expanded. May raise RuntimeError for an unknown user."""
    if path is None or str(path).strip() == "":
        return Path(DEFAULT_TASKS_FILE)
    return Path(path).expanduser()


def save_tasks(tasks: Iterable[Task], path: str | Path | None = None) -> bool:
    tasks = list(tasks)
    target: Path | str | None = path
    tmp: Path | None = None
    try:
        target = resolve_path(path)
        tmp = target.with_name(target.name + ".tmp")
        text = encode_tasks(tasks)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(text, "utf-8")
        os.replace(tmp, target)
    except (OSError, ValueError, RuntimeError):
        logger.exception("Failed to save tasks to %s", target)
        if tmp is not None:
            with contextlib.suppress(OSError, ValueError):
                tmp.unlink()
        return False

    logger.info("Saved tasks: %d to %s", len(tasks), target)
    return True


def load_tasks_report(path: str | Path | None = None) -> DecodeResult:
    source: Path | str | None = path
    try:
        source = resolve_path(path)
        if not source.exists():
            logger.info("Tasks file does not exist: %s", source)
            return DecodeResult()
        text = source.read_text("utf-8")
    except (OSError, ValueError, RuntimeError):
        # UnicodeDecodeError is a ValueError.
        logger.exception("Failed to read tasks from %s", source)
        return DecodeResult()

    result = decode_tasks_report(text)
    logger.info(
        "Loaded tasks: %d from %s (skipped=%d)", len(result.tasks), source, len(result.skipped)
    )
    return result


def load_tasks(path: str | Path | None = None) -> list[Task]:
    return load_tasks_report(path).tasks
