# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from power_tasks.core.state import AppState
from power_tasks.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="power-tasks-test",
        log_level="WARNING",
        # Paths (tmp per test run)
        data_dir=tmp_path / "data",
        tasks_file=tmp_path / "tasks.json",
        # Features
        autoload=False,
        autosave=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with a real (in-memory) TaskStore."""
    return AppState(
        settings=settings,
        task_store=TaskStore(),
        tasks_file=settings.tasks_file,
    )
