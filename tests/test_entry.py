import threading
from datetime import datetime

import pytest

from workbench.corelog.entry import LogEntry, LogLevel, format_entry


def test_levels_are_ordered():
    entries = [
        LogEntry("m", level)
        for level in (
            LogLevel.NONE,
            LogLevel.FATAL,
            LogLevel.ERROR,
            LogLevel.WARNING,
            LogLevel.INFO,
        )
    ]
    ordered = sorted(entries, key=lambda entry: entry.level)
    assert [entry.level.label for entry in ordered] == [
        "INFO",
        "WARN",
        "ERROR",
        "FATAL",
        "NONE",
    ]


@pytest.mark.parametrize(
    "level, label",
    [
        (LogLevel.INFO, "INFO"),
        (LogLevel.WARNING, "WARN"),
        (LogLevel.ERROR, "ERROR"),
        (LogLevel.FATAL, "FATAL"),
        (LogLevel.NONE, "NONE"),
    ],
)
def test_labels(level, label):
    assert level.label == label


def test_entry_defaults():
    entry = LogEntry("msg")
    assert entry.level is LogLevel.INFO
    assert entry.source_class == "Unknown"
    assert entry.thread_id == threading.get_native_id()


def test_format_entry():
    entry = LogEntry(
        "hello",
        LogLevel.WARNING,
        "Src",
        timestamp=datetime(2024, 1, 2, 3, 4, 5),
        thread_id=7,
    )
    assert format_entry(entry) == "2024-01-02 03:04:05 [WARN]  [TID:7]  [Src] hello\n"


def test_format_entry_single_line():
    text = format_entry(LogEntry("body", LogLevel.FATAL, "Crash"))
    assert text.endswith("[Crash] body\n")
    assert text.count("\n") == 1
    assert "[FATAL]" in text