# src/power_tasks/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.task_codec import TaskDecodeError, parse_deadline
from ..tasks.task_file import load_tasks_report, save_tasks
from ..tasks.task_models import Priority, Task, TaskStatus
from ..tasks.task_store import SORT_CRITERIA

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

DATE_INPUT_FORMAT = "%Y-%m-%d %H:%M"
DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Bad user input (ValueError from a handler) is turned into an error line;
        anything else propagates to the caller.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            logger.debug("Command /%s rejected input: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Leave the tracker.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- input helpers ----


def split_options(args: Iterable[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `key=value` tokens from positional ones. Keys are lower-cased."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for token in args:
        key, sep, value = token.partition("=")
        if sep and key.isidentifier():
            options[key.lower()] = value
        else:
            positional.append(token)
    return positional, options


def parse_deadline_input(raw: str) -> datetime:
    text = (raw or "").strip()
    try:
        return datetime.strptime(text, DATE_INPUT_FORMAT)
    except ValueError:
        pass
    try:
        return parse_deadline(text)
    except TaskDecodeError:
        raise ValueError(f"Invalid date '{raw}'. Use format YYYY-MM-DD HH:MM.") from None


def parse_task_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid task id '{raw}'.") from None


def format_task(task: Task) -> str:
    return (
        f"Task #{task.id}: {task.title} [{task.status.label}]\n"
        f"  Description: {task.description}\n"
        f"  Deadline: {task.deadline.strftime(DATE_DISPLAY_FORMAT)}\n"
        f"  Priority: {task.priority.label}\n"
        f"  Status: {task.status.label}"
    )


def format_tasks(tasks: list[Task], header: str) -> str:
    lines = [header]
    for t in tasks:
        lines.append(format_task(t))
        lines.append("--------------------")
    return "\n".join(lines)


def _require_no_unknown(options: dict[str, str], allowed: set[str]) -> None:
    unknown = sorted(set(options) - allowed)
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}.")


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    last = state.last_file if state.last_file is not None else "-"
    return (
        "Status:\n"
        f"  Tasks in memory: {state.task_store.count_tasks()}\n"
        f"  Default file: {state.tasks_file}\n"
        f"  Last saved/loaded: {last}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Buy milk" deadline="2026-10-20 18:00" [description=...] [priority=high]
    """
    positional, options = split_options(args)
    _require_no_unknown(options, {"title", "description", "deadline", "priority"})

    title = options.get("title")
    if title is None and positional:
        title = " ".join(positional)
    if not title:
        return 'Usage: /add title="..." deadline="YYYY-MM-DD HH:MM" [description=...] [priority=low|medium|high]'
    if "deadline" not in options:
        return "A deadline is required: deadline=\"YYYY-MM-DD HH:MM\"."

    deadline = parse_deadline_input(options["deadline"])
    priority = Priority.parse(options["priority"]) if "priority" in options else Priority.MEDIUM

    task = state.task_store.create_task(
        title=title.strip(),
        description=options.get("description", "").strip(),
        deadline=deadline,
        priority=priority,
    )
    return "Task created.\n" + format_task(task)


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.all_tasks()
    if not tasks:
        return "No tasks found."
    return format_tasks(tasks, f"Tasks ({len(tasks)}):")


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = state.task_store.get_task(parse_task_id(args[0]))
    if task is None:
        return "Task not found."
    return format_task(task)


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <id> [title=...] [description=...] [deadline=...] [priority=...] [status=...]
    """
    positional, options = split_options(args)
    if not positional:
        return "Usage: /update <id> [title=...] [description=...] [deadline=...] [priority=...] [status=...]"
    _require_no_unknown(options, {"title", "description", "deadline", "priority", "status"})

    task_id = parse_task_id(positional[0])
    if state.task_store.get_task(task_id) is None:
        return "Task not found."
    if not options:
        return "Nothing to update."

    updated = state.task_store.update_task(
        task_id,
        title=options["title"].strip() if "title" in options else None,
        description=options["description"].strip() if "description" in options else None,
        deadline=parse_deadline_input(options["deadline"]) if "deadline" in options else None,
        priority=Priority.parse(options["priority"]) if "priority" in options else None,
        status=TaskStatus.parse(options["status"]) if "status" in options else None,
    )
    if not updated:
        return "Failed to update task."
    task = state.task_store.get_task(task_id)
    return "Task updated.\n" + format_task(task)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    task_id = parse_task_id(args[0])
    if not state.task_store.delete_task(task_id):
        return "Task not found."
    return f"Task #{task_id} deleted."


def cmd_search(state: AppState, args: list[str]) -> str:
    keyword = " ".join(args).strip()
    if not keyword:
        return "Usage: /search <keyword>"
    results = state.task_store.search(keyword)
    if not results:
        return f"No tasks match '{keyword}'."
    return format_tasks(results, f"Search results for '{keyword}':")


def cmd_find(state: AppState, args: list[str]) -> str:
    """
    /find [title=...] [status=...] [priority=...]  (omitted fields are ignored)
    """
    _, options = split_options(args)
    _require_no_unknown(options, {"title", "status", "priority"})

    status = TaskStatus.parse(options["status"]) if options.get("status") else None
    priority = Priority.parse(options["priority"]) if options.get("priority") else None
    results = state.task_store.search_by_fields(
        title=options.get("title") or None,
        status=status,
        priority=priority,
    )
    if not results:
        return "No tasks match the given criteria."
    return format_tasks(results, "Tasks matching the given criteria:")


def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort [deadline|priority|status|title|id] [asc|desc]
    """
    criteria = args[0].lower() if args else "deadline"
    if criteria not in SORT_CRITERIA:
        raise ValueError(f"Unknown sort criteria '{args[0]}'. Use one of: {', '.join(SORT_CRITERIA)}.")

    order = args[1].lower() if len(args) > 1 else "asc"
    if order not in ("asc", "desc"):
        raise ValueError("Sort order must be asc or desc.")
    ascending = order == "asc"

    tasks = state.task_store.sort_tasks(criteria, ascending=ascending)
    if not tasks:
        return "No tasks to sort."
    direction = "ascending" if ascending else "descending"
    return format_tasks(tasks, f"Tasks sorted by {criteria} ({direction}):")


def cmd_save(state: AppState, args: list[str]) -> str:
    """
    /save [path]  -> write all tasks (default file when path is omitted)
    """
    tasks = state.task_store.all_tasks()
    if not tasks:
        return "No tasks to save."

    path = Path(args[0]) if args else state.tasks_file
    if not save_tasks(tasks, path):
        return f"Failed to save tasks to {path}."
    state.last_file = path
    return f"Saved {len(tasks)} tasks to {path}."


def cmd_load(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /load [path]          -> append tasks from file (new ids)
    /load [path] replace  -> replace current tasks (ids from file kept)
    """
    replace_mode = bool(args) and args[-1].lower() == "replace"
    rest = args[:-1] if replace_mode else args
    path = Path(rest[0]) if rest else state.tasks_file

    result = load_tasks_report(path)

    if result.skipped and emit:
        for skipped in result.skipped:
            with contextlib.suppress(Exception):
                emit(f"[LOAD] Skipped object #{skipped.index}: {skipped.reason}")

    if not result.tasks:
        return f"Could not load tasks from {path}, or the file is empty."

    if replace_mode:
        loaded = state.task_store.replace_all(result.tasks)
        verb = "Replaced current list with"
    else:
        loaded = state.task_store.import_tasks(result.tasks)
        verb = "Added"

    state.last_file = path
    msg = f"{verb} {len(loaded)} tasks from {path}."
    if result.skipped:
        msg += f" Skipped {len(result.skipped)} malformed entries."
    return msg


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count and data file.")
registry.register(
    "add",
    cmd_add,
    help_text='Create a task: /add title="..." deadline="YYYY-MM-DD HH:MM" [description=...] [priority=...].',
    aliases=["new"],
)
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "update",
    cmd_update,
    help_text="Update a task: /update <id> [title=...] [description=...] [deadline=...] [priority=...] [status=...].",
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("search", cmd_search, help_text="Keyword search in title/description.")
registry.register(
    "find", cmd_find, help_text="Search by fields: /find [title=...] [status=...] [priority=...]."
)
registry.register(
    "sort", cmd_sort, help_text="Sorted view: /sort [deadline|priority|status|title|id] [asc|desc]."
)
registry.register("save", cmd_save, help_text="Save tasks to a JSON file: /save [path].")
registry.register(
    "load", cmd_load, help_text="Load tasks from a JSON file: /load [path] [replace]."
)
