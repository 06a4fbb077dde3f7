"""Line-based command protocol over stdin/stdout for the mail tools."""

from __future__ import annotations

import argparse
import os
import sys
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from workbench.mail import api
from workbench.mail.bulk import BulkSendError
from workbench.mail.config import ConfigError
from workbench.mail.logsearch import LogSearchError
from workbench.mail.pop3 import Pop3Error
from workbench.mail.smtp import SmtpError
from workbench.mail.stats import StatsError

READY = "EMAIL_MODULE_STDIO_READY"
BYE = "OK|BYE"
UNKNOWN = "ERR|UnknownCmd"
NEED_ARGS = "ERR|Need 3 args"

DEFAULT_EMAIL_CONF = (
    "server_ip=127.0.0.1\n"
    "port=2525\n"
    "from_address=test@example.com\n"
    "use_auth=0\n"
    "io_timeout_ms=5000\n"
    "max_retry=1\n"
)

DEFAULT_RECIPIENTS = "alice@example.com,Alice\nbob@example.com,Bob\n"

DEFAULT_MAIL_TEMPLATE = (
    "Subject: Test mail for ${name}\r\n"
    "\r\n"
    "Dear ${name},\r\n"
    "\r\n"
    "This is a test mail (message ${index}).\r\n"
    "\r\n"
    "Regards,\r\nThe test team\r\n"
)

_DEFAULT_FILES = (
    ("email.conf", DEFAULT_EMAIL_CONF),
    ("recipients.txt", DEFAULT_RECIPIENTS),
    ("mail_template.txt", DEFAULT_MAIL_TEMPLATE),
)

_FAILURES = (
    ConfigError,
    SmtpError,
    BulkSendError,
    StatsError,
    LogSearchError,
    Pop3Error,
    OSError,
)

_LOCK = threading.Lock()


def description() -> str:
    """Return the short name of this module."""
    return "Email Module"


def split_pipe(line: str) -> list[str]:
    """Split on ``|``; a trailing ``|`` adds no empty field."""
    if not line:
        return []
    parts = line.split("|")
    if line.endswith("|"):
        parts.pop()
    return parts


def write_default_files(directory: str | Path) -> list[Path]:
    """Write the built-in configuration, recipients and template into ``directory``."""
    base = Path(directory)
    written = []
    for name, content in _DEFAULT_FILES:
        path = base / name
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        written.append(path)
    return written


@contextmanager
def _working_directory(path: str | Path) -> Iterator[None]:
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(previous)


def _handle(parts: list[str]) -> str:
    command = parts[0]
    try:
        if command == "SEND_SIMPLE":
            if len(parts) < 4:
                return NEED_ARGS
            api.send_simple_mail(parts[1], parts[2], parts[3])
            return "OK|SENT"
        if command == "BULK_SEND":
            api.send_bulk_mails()
            return "OK|BULK_DONE"
        if command == "SHOW_STATS":
            api.show_statistics()
            return "OK|STATS_SHOWN"
        if command == "SEARCH_LOG":
            keyword, start, end = (parts[1:] + ["", "", ""])[:3]
            api.search_log(keyword, start, end)
            return "OK|SEARCH_DONE"
        if command == "CHECK_MAIL":
            return f"OK|{api.check_inbox()}"
    except _FAILURES as exc:
        return f"ERR|{exc}"
    return UNKNOWN


def _serve(input_stream: TextIO, out: TextIO) -> int:
    out.write(READY + "\n")
    out.flush()
    for raw in input_stream:
        line = raw.rstrip("\r\n")
        if not line:
            continue
        parts = split_pipe(line)
        if parts[0] in ("QUIT", "EXIT"):
            out.write(BYE + "\n")
            out.flush()
            break
        out.write(_handle(parts) + "\n")
        out.flush()
    return 0


def run(input_stream: TextIO | None = None, out: TextIO | None = None) -> int:
    """Serve commands from ``input_stream`` in a scratch directory of default files.

    The working directory is restored and the scratch directory removed on exit.
    """
    input_stream = input_stream if input_stream is not None else sys.stdin
    out = out if out is not None else sys.stdout
    with _LOCK:
        try:
            scratch = tempfile.TemporaryDirectory(prefix="emailmod_")
        except OSError as exc:
            out.write(f"ERR|InitFailed|{exc}\n")
            return -1
        with scratch as directory:
            try:
                write_default_files(directory)
            except OSError as exc:
                out.write(f"ERR|InitFailed|{exc}\n")
                return -1
            with _working_directory(directory):
                return _serve(input_stream, out)


def main(argv: list[str] | None = None) -> int:
    """Run the command protocol on stdin and stdout."""
    parser = argparse.ArgumentParser(description=description())
    parser.parse_args(argv)
    return run(sys.stdin, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())