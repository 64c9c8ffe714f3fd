# src/power_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class _RankedEnum(StrEnum):
    """
    StrEnum whose values are the on-disk names.

    Notes:
    - comparison between members must follow declaration order, not the
      alphabetical order of the names; use `rank` as the sort key.
    """

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    @classmethod
    def parse(cls, raw: str) -> _RankedEnum:
        """Lenient user-input parsing: name in any case, or menu number 1..N."""
        text = (raw or "").strip()
        members = list(cls)
        if text.isdigit():
            n = int(text)
            if 1 <= n <= len(members):
                return members[n - 1]
        key = text.upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(m.value for m in members)
            raise ValueError(f"Unknown {cls.__name__.lower()} '{raw}'. Use one of: {allowed}") from None


class Priority(_RankedEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def label(self) -> str:
        return {"LOW": "Low", "MEDIUM": "Medium", "HIGH": "High"}[self.value]


class TaskStatus(_RankedEnum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def label(self) -> str:
        return {"TODO": "To do", "IN_PROGRESS": "In progress", "DONE": "Done"}[self.value]


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    deadline: datetime
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
