# tests/test_console_connector.py

from __future__ import annotations

from collections.abc import Iterable

from taskdesk.connectors.console_connector import run_console_loop


def _scripted(lines: Iterable[str]):
    it = iter(lines)

    def fake_input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


def test_console_runs_commands_until_exit(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        input_fn=_scripted(["/add Buy milk | 2 litres", "", "milk", "/stats", "/exit", "/add never"]),
        output_fn=out.append,
    )

    assert state.task_store.count() == 1
    assert any("Added task" in line for line in out)
    # plain text is a search
    assert state.keyword == "milk"
    assert any("Total: 1" in line for line in out)


def test_console_confirms_delete_through_input(state) -> None:
    task = state.task_store.add("Delete me")
    out: list[str] = []
    run_console_loop(
        state,
        input_fn=_scripted([f"/rm {task.id}", "n", f"/rm {task.id}", "y"]),
        output_fn=out.append,
    )

    assert "Cancelled." in out
    assert state.task_store.count() == 0


def test_console_survives_handler_crash(state, monkeypatch) -> None:
    def boom(state, args):
        raise RuntimeError("boom")

    from taskdesk.cli.commands import registry

    monkeypatch.setitem(registry._handlers, "crash", boom)  # noqa: SLF001
    out: list[str] = []
    run_console_loop(state, input_fn=_scripted(["/crash", "/stats"]), output_fn=out.append)

    assert "Internal error while handling a command." in out
    assert any("Total: 0" in line for line in out)
