# src/power_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the command layer.

Commands depend on this Protocol instead of the concrete TaskStore, which
keeps the console testable with a fake repository.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol


class TaskRepo(Protocol):
    # CRUD
    def count_tasks(self) -> int: ...
    def create_task(
            self,
            *,
            title: str,
            description: str,
            deadline: datetime,
            priority: Any = None,  # Priority (kept as Any to avoid import coupling)
            status: Any = None,  # TaskStatus
    ) -> Any: ...
    def all_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any | None: ...
    def update_task(
            self,
            task_id: int,
            *,
            title: str | None = None,
            description: str | None = None,
            deadline: datetime | None = None,
            priority: Any | None = None,
            status: Any | None = None,
    ) -> bool: ...
    def delete_task(self, task_id: int) -> bool: ...

    # Queries
    def search(self, keyword: str) -> list[Any]: ...
    def search_by_fields(
            self,
            *,
            title: str | None = None,
            status: Any | None = None,
            priority: Any | None = None,
    ) -> list[Any]: ...
    def sort_tasks(self, criteria: str = "deadline", *, ascending: bool = True) -> list[Any]: ...

    # Bulk (file load)
    def import_tasks(self, tasks: Iterable[Any]) -> list[Any]: ...
    def replace_all(self, tasks: Iterable[Any]) -> list[Any]: ...
