# tests/test_commands.py

from __future__ import annotations

from datetime import datetime

from power_tasks.cli.commands import CommandRegistry, registry, split_options
from power_tasks.tasks.task_models import Priority, TaskStatus


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    notes: list[str] = []
    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/BEE", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Cannot parse" in (reg.handle(state, '/a "unterminated') or "")


def test_command_registry_turns_value_errors_into_text(state) -> None:
    reg = CommandRegistry()

    def boom(state, args):
        raise ValueError("bad input")

    reg.register("boom", boom, "boom")
    assert reg.handle(state, "/boom") == "Error: bad input"


def test_split_options() -> None:
    positional, options = split_options(["7", "Title=x", "a=b=c", "=v", "plain"])
    assert positional == ["7", "=v", "plain"]
    assert options == {"title": "x", "a": "b=c"}


def test_add_list_and_show(state) -> None:
    reply = registry.handle(
        state, '/add title="Buy milk" deadline="2026-10-20 18:00" priority=high description="2% fat"'
    )
    assert reply is not None and reply.startswith("Task created.")

    task = state.task_store.get_task(1)
    assert task.title == "Buy milk"
    assert task.description == "2% fat"
    assert task.deadline == datetime(2026, 10, 20, 18, 0)
    assert task.priority is Priority.HIGH

    listing = registry.handle(state, "/list")
    assert "Task #1: Buy milk [To do]" in listing
    assert "Deadline: 2026-10-20 18:00" in listing
    assert "Priority: High" in listing
    assert "Task #1" in registry.handle(state, "/show 1")
    assert registry.handle(state, "/show 2") == "Task not found."


def test_add_validation(state) -> None:
    assert "deadline is required" in registry.handle(state, '/add title="x"').lower()
    assert registry.handle(state, '/add title="x" deadline="tomorrow"').startswith(
        "Error: Invalid date"
    )
    assert registry.handle(state, '/add title=x deadline="2026-10-20 18:00" priority=urgent').startswith(
        "Error: Unknown priority"
    )
    assert registry.handle(state, "/add").startswith("Usage")
    assert state.task_store.count_tasks() == 0


def test_add_accepts_positional_title_and_menu_numbers(state) -> None:
    registry.handle(state, '/add Pay rent deadline=2026-11-01T09:00 priority=3')

    task = state.task_store.get_task(1)
    assert task.title == "Pay rent"
    assert task.priority is Priority.HIGH


def test_update_and_delete(state) -> None:
    registry.handle(state, '/add title=a deadline="2026-10-20 18:00"')

    reply = registry.handle(state, "/update 1 status=in_progress title=b")
    assert reply.startswith("Task updated.")
    task = state.task_store.get_task(1)
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.title == "b"

    assert registry.handle(state, "/update 1") == "Nothing to update."
    assert registry.handle(state, "/update 9 title=x") == "Task not found."
    assert registry.handle(state, "/update x title=x") == "Error: Invalid task id 'x'."

    assert registry.handle(state, "/delete 1") == "Task #1 deleted."
    assert registry.handle(state, "/delete 1") == "Task not found."


def test_search_find_and_sort(state) -> None:
    registry.handle(state, '/add title="Report" deadline="2026-10-22 10:00" priority=low')
    registry.handle(state, '/add title="Groceries" deadline="2026-10-21 10:00" priority=high')
    registry.handle(state, "/update 2 status=done")

    assert "Groceries" in registry.handle(state, "/search grocer")
    assert registry.handle(state, "/search nope") == "No tasks match 'nope'."

    found = registry.handle(state, "/find status=done")
    assert "Groceries" in found and "Report" not in found
    assert registry.handle(state, "/find priority=medium") == "No tasks match the given criteria."

    sorted_reply = registry.handle(state, "/sort priority desc")
    assert sorted_reply.index("Groceries") < sorted_reply.index("Report")
    assert registry.handle(state, "/sort colour").startswith("Error: Unknown sort criteria")


def test_save_and_load_round_trip(state, tmp_path) -> None:
    assert registry.handle(state, "/save") == "No tasks to save."

    registry.handle(state, '/add title="a" deadline="2026-10-20 18:00"')
    registry.handle(state, '/add title="b" deadline="2026-10-21 18:00"')
    registry.handle(state, "/delete 1")

    reply = registry.handle(state, "/save")
    assert reply == f"Saved 1 tasks to {state.tasks_file}."
    assert state.last_file == state.tasks_file

    # Append mode: loaded tasks get fresh ids after the existing ones.
    reply = registry.handle(state, "/load")
    assert reply.startswith("Added 1 tasks")
    assert [t.id for t in state.task_store.all_tasks()] == [2, 3]

    # Replace mode: ids from the file are restored.
    other = tmp_path / "other.json"
    registry.handle(state, f'/save "{other}"')
    reply = registry.handle(state, f'/load "{other}" replace')
    assert reply.startswith("Replaced current list with 2 tasks")
    assert [t.id for t in state.task_store.all_tasks()] == [2, 3]


def test_load_reports_missing_and_skipped(state, tmp_path) -> None:
    missing = tmp_path / "missing.json"
    assert registry.handle(state, f'/load "{missing}"').startswith("Could not load tasks")

    path = tmp_path / "partial.json"
    path.write_text(
        '[{"title": "ok", "deadline": "2026-10-20T18:00:00"}, {"title": "no deadline"}]',
        "utf-8",
    )
    notes: list[str] = []
    reply = registry.handle(state, f'/load "{path}"', emit=notes.append)

    assert reply.endswith("Skipped 1 malformed entries.")
    assert notes == ["[LOAD] Skipped object #1: missing deadline"]
    assert state.task_store.count_tasks() == 1


def test_help_and_status(state) -> None:
    help_text = registry.handle(state, "/help")
    assert "/add" in help_text and "/load" in help_text and "/exit" in help_text
    assert registry.handle(state, "/?") == help_text

    status = registry.handle(state, "/status")
    assert "Tasks in memory: 0" in status
    assert str(state.tasks_file) in status


def test_load_and_save_with_unusable_path_report_failure(state) -> None:
    assert registry.handle(state, "/load ~no_such_user_zz/x.json").startswith("Could not load tasks")

    registry.handle(state, '/add title=a deadline="2026-10-20 18:00"')
    assert registry.handle(state, "/save ~no_such_user_zz/x.json") == (
        "Failed to save tasks to ~no_such_user_zz/x.json."
    )
    assert state.last_file is None
