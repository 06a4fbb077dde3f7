"""Sending statistics gathered from ``email.log``."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from workbench.mail.logsearch import extract_time

SINGLE_SUCCESS = "mail sent successfully"
SINGLE_FAILURE = "mail sending failed"
BULK_SUCCESS = "bulk: sent successfully to"
BULK_FAILURE = "bulk: sending to"
BULK_FAILURE_WORD = "failed"

_TO_RE = re.compile(r"To=([^, ]*)")
_BULK_SUCCESS_RE = re.compile(re.escape(BULK_SUCCESS + " ") + r"([^ (]*)")
_BULK_FAILURE_RE = re.compile(re.escape(BULK_FAILURE + " ") + r"([^ ,]*)")

_FRAME = "=" * 24


class StatsError(Exception):
    """Raised when the log cannot be read for statistics."""


@dataclass
class RecipientStat:
    """Outcome counts for one recipient address."""

    success: int = 0
    fail: int = 0
    last_time: str = ""


@dataclass
class EmailStatistics:
    """Totals over all send attempts recorded in the log."""

    total_success: int = 0
    total_fail: int = 0
    single_success: int = 0
    single_fail: int = 0
    bulk_success: int = 0
    bulk_fail: int = 0
    last_send_time: str = ""
    recipients: dict[str, RecipientStat] = field(default_factory=dict)

    @property
    def total_attempts(self) -> int:
        return self.total_success + self.total_fail


def extract_recipient(line: str) -> str:
    """Find the recipient address in a log line, or return ``""``."""
    for pattern in (_TO_RE, _BULK_SUCCESS_RE, _BULK_FAILURE_RE):
        match = pattern.search(line)
        if match and match.group(1):
            return match.group(1)
    return ""


def collect_statistics(lines: Iterable[str]) -> EmailStatistics:
    """Count successful and failed sends in the given log lines."""
    stats = EmailStatistics()
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            continue

        if SINGLE_SUCCESS in line:
            success = True
            stats.single_success += 1
        elif SINGLE_FAILURE in line:
            success = False
            stats.single_fail += 1
        elif BULK_SUCCESS in line:
            success = True
            stats.bulk_success += 1
        elif BULK_FAILURE in line and BULK_FAILURE_WORD in line:
            success = False
            stats.bulk_fail += 1
        else:
            continue

        stamp = extract_time(line)
        if stamp:
            stats.last_send_time = stamp
        if success:
            stats.total_success += 1
        else:
            stats.total_fail += 1

        email = extract_recipient(line)
        if email:
            entry = stats.recipients.setdefault(email, RecipientStat())
            if success:
                entry.success += 1
            else:
                entry.fail += 1
            if stamp:
                entry.last_time = stamp
    return stats


def show_statistics(
    path: str | Path = "email.log", out: TextIO | None = None
) -> EmailStatistics:
    """Read the log, print a summary to ``out`` and return the statistics."""
    out = out if out is not None else sys.stdout
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            stats = collect_statistics(handle)
    except OSError as exc:
        raise StatsError(
            f"cannot open {path}; send a few messages first to create the log"
        ) from exc

    if stats.total_attempts == 0:
        out.write(
            "\n[stats] No sending records in the log yet; "
            "send a few messages first.\n"
        )
        return stats

    out.write("\n===== Mail sending statistics =====\n")
    out.write(f"Total send attempts : {stats.total_attempts}\n")
    out.write(f"  Succeeded         : {stats.total_success}\n")
    out.write(f"  Failed            : {stats.total_fail}\n\n")
    out.write("  Of which:\n")
    out.write(f"    Single succeeded : {stats.single_success}\n")
    out.write(f"    Single failed    : {stats.single_fail}\n")
    out.write(f"    Bulk succeeded   : {stats.bulk_success}\n")
    out.write(f"    Bulk failed      : {stats.bulk_fail}\n\n")
    if stats.last_send_time:
        out.write(f"Last send time : {stats.last_send_time}\n")
    else:
        out.write("Last send time : (no time found in the log)\n")
    out.write(_FRAME + "\n")

    if stats.recipients:
        out.write("\n===== Per recipient =====\n")
        for email in sorted(stats.recipients):
            entry = stats.recipients[email]
            text = f"{email}  succeeded: {entry.success}  failed: {entry.fail}"
            if entry.last_time:
                text += f"  last sent: {entry.last_time}"
            out.write(text + "\n")
        out.write(_FRAME + "\n")
    return stats