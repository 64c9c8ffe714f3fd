# tests/test_console_connector.py

from __future__ import annotations

from power_tasks.cli.commands import CommandRegistry
from power_tasks.connectors.console_connector import run_console_loop

from .fakes import ScriptedInput


def test_console_runs_commands_until_exit(state, capsys) -> None:
    script = ScriptedInput(
        [
            '/add title="Buy milk" deadline="2026-10-20 18:00"',
            "",
            "hello",
            "/list",
            "/exit",
            "/list",  # never reached
        ]
    )

    run_console_loop(state, read_line=script)

    out = capsys.readouterr().out
    assert "Task created." in out
    assert "Commands start with '/'" in out
    assert "Tasks (1):" in out
    assert len(script.prompts) == 5
    assert state.task_store.count_tasks() == 1


def test_console_stops_on_eof(state) -> None:
    script = ScriptedInput(["/status"])
    run_console_loop(state, read_line=script)
    assert len(script.prompts) == 2


def test_console_survives_crashing_handler(state, capsys) -> None:
    reg = CommandRegistry()

    def crash(state, args):
        raise RuntimeError("boom")

    reg.register("crash", crash, "crash")
    run_console_loop(state, registry=reg, read_line=ScriptedInput(["/crash", "/quit"]))

    assert "Internal error while handling a command." in capsys.readouterr().out
