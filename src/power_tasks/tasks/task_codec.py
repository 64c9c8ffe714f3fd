# src/power_tasks/tasks/task_codec.py

"""
Hand-written JSON codec for task lists.

The on-disk format is a flat JSON array of six-field objects:

    [
      {
        "id": 1,
        "title": "Buy milk",
        "description": "",
        "deadline": "2026-10-20T18:00:00",
        "priority": "MEDIUM",
        "status": "TODO"
      }
    ]

Encoding is strict about layout (key order, indentation, bare integer id).
Decoding is lenient and best-effort:
- text that is not bracketed as an array yields no tasks,
- objects are split by brace depth, properties by `,"key":` lookahead,
- an object with a bad field is skipped, its siblings still load,
- string values are NOT unescaped on read.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

INDENT = "  "

# ISO local date-time, zero padded: seconds optional, fraction of 1-9 digits
# (truncated to microseconds). We always write the seconds form.
_DEADLINE_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2})"
    r"(?::([0-9]{2})(?:\.([0-9]{1,9}))?)?"
)

_PROPERTY_SPLIT_RE = re.compile(r',(?=\s*"[^"]+"\s*:)')
_INT_RE = re.compile(r"[+-]?\d+")


class TaskDecodeError(ValueError):
    """Raised for a single malformed task object; never escapes decode_tasks()."""


@dataclass(slots=True)
class SkippedObject:
    index: int
    reason: str
    raw: str


@dataclass(slots=True)
class DecodeResult:
    tasks: list[Task] = field(default_factory=list)
    skipped: list[SkippedObject] = field(default_factory=list)


# ---- encoding ----


def escape_json(value: str | None) -> str:
    if value is None:
        return ""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def format_deadline(value: datetime) -> str:
    return value.replace(tzinfo=None, microsecond=0).isoformat(timespec="seconds")


def _encode_task(task: Task) -> str:
    pad = INDENT * 2
    lines = [
        f"{INDENT}{{",
        f'{pad}"id": {int(task.id)},',
        f'{pad}"title": "{escape_json(task.title)}",',
        f'{pad}"description": "{escape_json(task.description)}",',
        f'{pad}"deadline": "{format_deadline(task.deadline)}",',
        f'{pad}"priority": "{Priority(task.priority).name}",',
        f'{pad}"status": "{TaskStatus(task.status).name}"',
        f"{INDENT}}}",
    ]
    return "\n".join(lines)


def encode_tasks(tasks: Iterable[Task]) -> str:
    """Serialize tasks to a pretty-printed JSON array, preserving order."""
    objects = [_encode_task(t) for t in tasks]
    if not objects:
        return "[]"
    return "[\n" + ",\n".join(objects) + "\n]"


# ---- decoding ----


def split_objects(body: str) -> list[str]:
    """
    Split the array body into top-level `{...}` substrings by brace depth.

    Separators between objects are dropped. An object still open at the end
    of input is discarded. Braces inside string values are not special.
    """
    objects: list[str] = []
    depth = 0
    current: list[str] = []

    for ch in body:
        if ch == "{":
            depth += 1
            current.append(ch)
        elif ch == "}":
            depth -= 1
            current.append(ch)
            if depth == 0:
                objects.append("".join(current))
                current = []
        elif depth > 0:
            current.append(ch)

    return objects


def _unquote(value: str) -> str:
    if value.startswith('"') and value.endswith('"'):
        if len(value) < 2:
            raise TaskDecodeError("unterminated string value '\"'")
        return value[1:-1]
    return value


def _parse_id(value: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise TaskDecodeError(f"invalid id {value!r}")
    return int(value)


def parse_deadline(value: str) -> datetime:
    m = _DEADLINE_RE.fullmatch(value)
    if not m:
        raise TaskDecodeError(f"invalid deadline {value!r}")
    year, month, day, hour, minute, second, fraction = m.groups()
    micros = int((fraction or "").ljust(6, "0")[:6])
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second or 0), micros
        )
    except ValueError:
        raise TaskDecodeError(f"invalid deadline {value!r}") from None


def _parse_enum(enum_cls, value: str, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise TaskDecodeError(f"invalid {what} {value!r}") from None


def parse_task_object(raw: str) -> Task:
    """
    Build a Task from one `{...}` substring.

    Raises TaskDecodeError when a known field cannot be parsed or the
    deadline is missing.
    """
    body = raw[1:-1].strip()

    task_id = 0
    title = ""
    description = ""
    deadline: datetime | None = None
    priority = Priority.MEDIUM
    status = TaskStatus.TODO

    for prop in _PROPERTY_SPLIT_RE.split(body):
        parts = prop.split(":", 1)
        if len(parts) != 2:
            continue
        key = parts[0].strip().replace('"', "")
        value = _unquote(parts[1].strip())

        if key == "id":
            task_id = _parse_id(value)
        elif key == "title":
            title = value
        elif key == "description":
            description = value
        elif key == "deadline":
            deadline = parse_deadline(value)
        elif key == "priority":
            priority = _parse_enum(Priority, value, "priority")
        elif key == "status":
            status = _parse_enum(TaskStatus, value, "status")

    if deadline is None:
        raise TaskDecodeError("missing deadline")

    return Task(
        id=task_id,
        title=title,
        description=description,
        deadline=deadline,
        priority=priority,
        status=status,
    )


def decode_tasks_report(text: str | None) -> DecodeResult:
    """Decode as many tasks as possible and report the objects that were skipped."""
    result = DecodeResult()
    try:
        stripped = (text or "").strip()
        if not (stripped.startswith("[") and stripped.endswith("]")):
            if stripped:
                logger.warning("Task data is not a JSON array; nothing decoded.")
            return result

        for index, obj in enumerate(split_objects(stripped[1:-1].strip())):
            obj = obj.strip()
            if not obj:
                continue
            try:
                result.tasks.append(parse_task_object(obj))
            except Exception as e:
                logger.info("Skipping task object #%d: %s", index, e)
                result.skipped.append(SkippedObject(index=index, reason=str(e), raw=obj))
    except Exception:
        logger.exception("Failed to decode task data.")
        return DecodeResult()

    logger.debug(
        "Decoded tasks: ok=%d skipped=%d", len(result.tasks), len(result.skipped)
    )
    return result


def decode_tasks(text: str | None) -> list[Task]:
    """Decode a JSON array of tasks; malformed objects are dropped, never raises."""
    return decode_tasks_report(text).tasks
