"""Keyword search over ``email.log`` with an optional time window."""

from __future__ import annotations

import string
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_RULE = "-" * 40
_FRAME = "=" * 40


class LogSearchError(Exception):
    """Raised when the log file cannot be searched."""


@dataclass(frozen=True)
class LogMatch:
    """A matching log line and its 1-based line number."""

    line_number: int
    line: str


def extract_time(line: str) -> str:
    """Return the text inside the first ``[...]`` of a log line, or ``""``."""
    left = line.find("[")
    if left == -1:
        return ""
    right = line.find("]", left + 1)
    if right == -1:
        return ""
    return line[left + 1:right]


def normalize_time_key(text: str, is_start: bool) -> str:
    """Normalise a time bound to ``YYYY-MM-DD HH:MM:SS``.

    A bare date becomes the start or end of that day; anything shorter than a
    full timestamp that is not a date gives ``""`` (no bound).
    """
    if not text:
        return ""
    if len(text) >= 19:
        return text[:19]
    if len(text) == 10:
        return text + (" 00:00:00" if is_start else " 23:59:59")
    return ""


def contains_case_insensitive(text: str, keyword: str) -> bool:
    """Substring test ignoring ASCII letter case; an empty keyword never matches."""
    if not keyword:
        return False
    return keyword.translate(_ASCII_LOWER) in text.translate(_ASCII_LOWER)


def _read_lines(path: str | Path) -> list[str]:
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return [line.rstrip("\n") for line in handle]
    except OSError as exc:
        raise LogSearchError(
            f"cannot open {path}; send a few messages first to create the log"
        ) from exc


def search_log(
    keyword: str,
    start_time: str = "",
    end_time: str = "",
    path: str | Path = "email.log",
) -> list[LogMatch]:
    """Return the log lines that contain ``keyword`` and fall in the time window.

    Lines without a bracketed timestamp are not filtered by time.
    """
    start = normalize_time_key(start_time, True)
    end = normalize_time_key(end_time, False)

    matches = []
    for number, line in enumerate(_read_lines(path), start=1):
        stamp = extract_time(line)
        if stamp:
            if start and stamp < start:
                continue
            if end and stamp > end:
                continue
        if contains_case_insensitive(line, keyword):
            matches.append(LogMatch(number, line))
    return matches


def show_search(
    keyword: str,
    start_time: str = "",
    end_time: str = "",
    path: str | Path = "email.log",
    out: TextIO | None = None,
) -> list[LogMatch]:
    """Search the log and print a report of the matches to ``out``."""
    out = out if out is not None else sys.stdout
    matches = search_log(keyword, start_time, end_time, path)
    start = normalize_time_key(start_time, True)
    end = normalize_time_key(end_time, False)

    out.write("\n===== Log search results =====\n")
    out.write(f'Keyword: "{keyword}"\n')
    if start:
        out.write(f"Start time: {start}\n")
    if end:
        out.write(f"End time: {end}\n")
    if not start and not end:
        out.write("Time range: unrestricted\n")
    out.write(_RULE + "\n")

    for match in matches:
        out.write(f"[{match.line_number}] {match.line}\n")

    if matches:
        out.write(_RULE + "\n")
        out.write(f"Total matching lines: {len(matches)}\n")
    else:
        out.write("No matching log lines found.\n")
    out.write(_FRAME + "\n")
    return matches