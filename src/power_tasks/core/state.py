# src/power_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    task_store: TaskRepo

    # Default file for /save and /load without a path.
    tasks_file: Path

    # Last file successfully saved to or loaded from.
    last_file: Path | None = None
