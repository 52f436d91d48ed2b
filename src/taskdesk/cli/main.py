# src/taskdesk/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs a single command given on the command line (`taskdesk add Buy milk`), or
- starts the console REPL.
"""

from __future__ import annotations

import contextlib
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from .commands import CommandIO
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    kv = getattr(state, "kv_store", None)
    if kv is not None and hasattr(kv, "close"):
        try:
            kv.close()
        except Exception:
            logger.debug("Store close failed.", exc_info=True)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_file=settings.log_file, console_level=console_level)

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    # IMPORTANT: reuse same settings object.
    # Save failures are reported by the command replies (see _with_save_warning).
    state = create_initial_state(settings=settings)

    try:
        if argv:
            line = " ".join(argv)
            if not line.startswith("/"):
                line = "/" + line
            reply = command_registry.handle(state, line, CommandIO())
            if reply is not None:
                print(reply)
            return 0

        with contextlib.suppress(KeyboardInterrupt):
            run_console_loop(state)
        return 0
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())
