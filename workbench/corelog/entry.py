"""Log levels, log records and their one-line text form."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

_LABELS = {
    0: "INFO",
    1: "WARN",
    2: "ERROR",
    3: "FATAL",
    4: "NONE",
}


class LogLevel(IntEnum):
    """Severity, ordered from least to most severe; NONE disables logging."""

    INFO = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3
    NONE = 4

    @property
    def label(self) -> str:
        """The short name written into log lines (``WARN`` for warnings)."""
        return _LABELS[self.value]


@dataclass
class LogEntry:
    """One log record."""

    message: str
    level: LogLevel = LogLevel.INFO
    source_class: str = "Unknown"
    timestamp: datetime = field(default_factory=datetime.now)
    thread_id: int = field(default_factory=threading.get_native_id)


def format_entry(entry: LogEntry) -> str:
    """Render ``entry`` as one newline-terminated log line."""
    stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
    return (
        f"{stamp} [{entry.level.label}]  [TID:{entry.thread_id}]  "
        f"[{entry.source_class}] {entry.message}\n"
    )