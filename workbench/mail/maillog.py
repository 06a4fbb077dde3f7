"""Append-only text log for the mail tools (``email.log``)."""

from __future__ import annotations

import sys
from pathlib import Path

from workbench.mail.utils import current_time_string

DEFAULT_LOG_PATH = "email.log"


def log(level: str, message: str, path: str | Path = DEFAULT_LOG_PATH) -> None:
    """Append ``[time][level] message`` to the log file.

    A log that cannot be opened is reported on stderr and otherwise ignored.
    """
    try:
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(f"[{current_time_string()}][{level}] {message}\n")
    except OSError:
        print(f"[LOGGER ERROR] Cannot open {path}", file=sys.stderr)


def info(message: str, path: str | Path = DEFAULT_LOG_PATH) -> None:
    """Log ``message`` at INFO level."""
    log("INFO", message, path)


def error(message: str, path: str | Path = DEFAULT_LOG_PATH) -> None:
    """Log ``message`` at ERROR level."""
    log("ERROR", message, path)