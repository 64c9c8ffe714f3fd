# src/power_tasks/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

SORT_CRITERIA = ("deadline", "priority", "status", "title", "id")

_SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    "deadline": lambda t: t.deadline,
    "priority": lambda t: t.priority.rank,
    "status": lambda t: t.status.rank,
    "title": lambda t: t.title,
    "id": lambda t: t.id,
}


class TaskStore:
    """
    In-memory task list.

    Identifiers:
    - assigned from a per-instance counter starting at 1,
    - never reused within one store, even after deletes,
    - two stores never share a sequence.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = []
        self._next_id = 1
        if tasks:
            self.replace_all(tasks)

    # ---- low-level helpers ----

    def _allocate_id(self) -> int:
        task_id = self._next_id
        self._next_id += 1
        return task_id

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def create_task(
        self,
        *,
        title: str,
        description: str,
        deadline: datetime,
        priority: Priority = Priority.MEDIUM,
        status: TaskStatus = TaskStatus.TODO,
    ) -> Task:
        if deadline is None:
            raise ValueError("deadline is required")

        task = Task(
            id=self._allocate_id(),
            title=title or "",
            description=description or "",
            deadline=deadline,
            priority=Priority(priority),
            status=TaskStatus(status),
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s priority=%s deadline=%s", task.id, task.priority, deadline)
        return task

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def update_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        deadline: datetime | None = None,
        priority: Priority | None = None,
        status: TaskStatus | None = None,
    ) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False

        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if deadline is not None:
            task.deadline = deadline
        if priority is not None:
            task.priority = Priority(priority)
        if status is not None:
            task.status = TaskStatus(status)

        logger.debug("Task updated id=%s status=%s", task.id, task.status)
        return True

    def delete_task(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        deleted = len(self._tasks) < before
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted

    def search(self, keyword: str) -> list[Task]:
        """Case-insensitive substring match over title or description."""
        needle = (keyword or "").lower()
        return [
            t
            for t in self._tasks
            if needle in t.title.lower() or needle in t.description.lower()
        ]

    def search_by_fields(
        self,
        *,
        title: str | None = None,
        status: TaskStatus | None = None,
        priority: Priority | None = None,
    ) -> list[Task]:
        """Empty criteria are ignored; title is a case-insensitive substring."""
        needle = title.lower() if title else None
        out: list[Task] = []
        for t in self._tasks:
            if needle is not None and needle not in t.title.lower():
                continue
            if status is not None and t.status != status:
                continue
            if priority is not None and t.priority != priority:
                continue
            out.append(t)
        return out

    def sort_tasks(self, criteria: str = "deadline", *, ascending: bool = True) -> list[Task]:
        """
        Return a sorted copy. Unknown criteria sort by id.

        Priority and status sort by declaration order (LOW < MEDIUM < HIGH,
        TODO < IN_PROGRESS < DONE).
        """
        key = _SORT_KEYS.get((criteria or "").lower(), _SORT_KEYS["id"])
        return sorted(self._tasks, key=key, reverse=not ascending)

    def import_tasks(self, tasks: Iterable[Task]) -> list[Task]:
        """Append copies of `tasks` under fresh identifiers."""
        added = [replace(t, id=self._allocate_id()) for t in tasks]
        self._tasks.extend(added)
        logger.info("Imported %d tasks (total=%d)", len(added), len(self._tasks))
        return added

    def replace_all(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Replace the whole list.

        A task keeps its identifier when it is positive and not taken by an
        earlier task in `tasks`; otherwise it gets a fresh one.
        """
        incoming = list(tasks)
        self._next_id = max((t.id for t in incoming if t.id > 0), default=0) + 1
        kept: set[int] = set()
        out: list[Task] = []
        for t in incoming:
            if t.id > 0 and t.id not in kept:
                kept.add(t.id)
                out.append(replace(t))
            else:
                out.append(replace(t, id=self._allocate_id()))

        self._tasks = out
        logger.info("Replaced task list (total=%d next_id=%d)", len(out), self._next_id)
        return list(out)
