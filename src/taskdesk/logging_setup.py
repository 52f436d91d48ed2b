# src/taskdesk/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console gate for the REPL, where log lines interleave with command replies.

    App records pass at the handler level. Loggers under `quiet` (the storage
    backends) only show WARNING+. Everything else, including captured
    `py.warnings`, only shows ERROR+.
    """

    def __init__(self, app_logger: str = "taskdesk", quiet: Sequence[str] = ("taskdesk.storage",)) -> None:
        super().__init__()
        self._app_prefix = app_logger + "."
        self._quiet = tuple(q + "." for q in quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(self._app_prefix):
            return record.levelno >= logging.ERROR
        if record.name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_file: str | Path,
    app_logger: str = "taskdesk",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all records to a filtered stderr handler and to `log_file`.

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter(app_logger, quiet=(f"{app_logger}.storage",)))

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(file_handler)
    logging.captureWarnings(True)
    return log_file
