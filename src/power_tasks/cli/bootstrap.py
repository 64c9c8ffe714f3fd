# src/power_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the in-memory TaskStore into AppState,
- optionally restores/persists the task list on start/exit.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_file import load_tasks, save_tasks
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        task_store=TaskStore(),
        tasks_file=settings.tasks_file,
    )


def autoload_tasks(state: AppState) -> int:
    """Restore the saved list (file ids kept) when autoload is on. Returns the count."""
    if not getattr(state.settings, "autoload", False):
        return 0
    tasks = load_tasks(state.tasks_file)
    if not tasks:
        return 0
    state.task_store.replace_all(tasks)
    state.last_file = state.tasks_file
    logger.info("Autoloaded %d tasks from %s", len(tasks), state.tasks_file)
    return len(tasks)


def autosave_tasks(state: AppState) -> bool:
    """
    Persist the list on exit when autosave is on.

    An empty list is written as `[]` so deleted tasks do not come back on
    the next autoload.
    """
    if not getattr(state.settings, "autosave", False):
        return False
    return save_tasks(state.task_store.all_tasks(), state.tasks_file)
