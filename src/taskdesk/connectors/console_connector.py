# src/taskdesk/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import CommandIO, render_view
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def run_console_loop(
    state: AppState,
    *,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> None:
    """
    Interactive REPL over the slash-command registry.

    Each line runs to completion before the next one is read.
    Plain text without a leading '/' is treated as a search keyword.
    """
    logger.info("Console connector started (tasks=%d).", state.task_store.count())
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskdesk"))

    def confirm(question: str) -> bool:
        try:
            answer = input_fn(f"{question} [y/N]: ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in ("y", "yes")

    io = CommandIO(confirm=confirm)

    output_fn(f"[{app_name}] Use /help for commands, /exit to quit.")
    output_fn(render_view(state))

    while True:
        try:
            user_input = input_fn(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            output_fn("")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = f"/search {user_input}"

        try:
            reply = command_registry.handle(state, user_input, io)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            output_fn(reply)

    logger.info("Console connector finished.")
