"""Thread-safe log file writer with size-based rolling and age-based cleanup."""

from __future__ import annotations

import os
import sys
import threading
import time
from pathlib import Path
from types import TracebackType
from typing import TextIO

from workbench.corelog.config import LogConfig, get_config
from workbench.corelog.entry import LogEntry, format_entry

MAX_LOG_FILE_SIZE_BYTES = 10 * 1024
DEFAULT_LOG_FILENAME = "application.log"

_ROLL_SUFFIX = ".%Y%m%d_%H%M%S.log"
_SECONDS_PER_DAY = 24 * 60 * 60


class FileWriter:
    """Appends formatted entries to ``log_path/filename``.

    Before each write the file is rolled to a timestamped backup once it has
    reached ``max_size`` bytes. On the first write, rolled backups older than
    the configured retention period are deleted.
    """

    def __init__(
        self,
        filename: str = DEFAULT_LOG_FILENAME,
        log_path: str | Path = ".",
        *,
        max_size: int = MAX_LOG_FILE_SIZE_BYTES,
        config: LogConfig | None = None,
    ) -> None:
        self.filename = filename
        self.log_path = Path(log_path)
        self.max_size = max_size
        self._config = config
        self._lock = threading.Lock()
        self._first_write = True
        self._stream: TextIO | None = None
        try:
            self.log_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            print(f"Error creating log directory: {exc}", file=sys.stderr)
            return
        self._open()

    @property
    def path(self) -> Path:
        """Full path of the active log file."""
        return self.log_path / self.filename

    def _open(self) -> None:
        try:
            self._stream = open(self.path, "a", encoding="utf-8")
        except OSError:
            self._stream = None
            print(f"Error: Could not open log file: {self.path}", file=sys.stderr)

    def run_cleanup(self) -> list[Path]:
        """Delete rolled log files older than the retention period.

        Only the first call does anything; later calls return an empty list.
        Returns the paths that were removed.
        """
        if not self._first_write:
            return []
        self._first_write = False

        config = self._config if self._config is not None else get_config()
        days = config.retention_days
        if days <= 0:
            return []

        prefix = DEFAULT_LOG_FILENAME.rpartition(".")[0]
        cutoff = time.time() - days * _SECONDS_PER_DAY
        removed: list[Path] = []
        print(f"Starting log cleanup. Retention days: {days}...")
        try:
            for entry in self.log_path.iterdir():
                if not entry.is_file():
                    continue
                name = entry.name
                if not name.startswith(prefix) or name == DEFAULT_LOG_FILENAME:
                    continue
                if entry.stat().st_mtime < cutoff:
                    entry.unlink()
                    removed.append(entry)
                    print(f"Cleaned up old log file: {name}")
            print("Log cleanup finished.")
        except OSError as exc:
            print(f"Error during log cleanup: {exc}", file=sys.stderr)
        return removed

    def _check_and_roll(self) -> None:
        if self._stream is None:
            return
        self._stream.flush()
        size = os.fstat(self._stream.fileno()).st_size
        if size >= self.max_size:
            self._roll()

    def _roll(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

        head, sep, _ = self.filename.rpartition(".")
        base = head if sep else self.filename
        rolled = self.log_path / (base + time.strftime(_ROLL_SUFFIX, time.localtime()))

        current = self.path
        if current.exists():
            if rolled.exists():
                print(
                    f"--- ROLL FAILED --- Error renaming file: {current}, "
                    f"target exists: {rolled}",
                    file=sys.stderr,
                )
            else:
                try:
                    os.rename(current, rolled)
                    print(f"Log file rolled: {current} -> {rolled}")
                except OSError as exc:
                    print(
                        f"--- ROLL FAILED --- Error renaming file: {current}, {exc}",
                        file=sys.stderr,
                    )
        self._open()

    def write(self, entry: LogEntry) -> None:
        """Write one entry and flush it to disk."""
        with self._lock:
            self.run_cleanup()
            self._check_and_roll()
            if self._stream is not None:
                self._stream.write(format_entry(entry))
                self._stream.flush()

    def close(self) -> None:
        """Close the log file; later writes are dropped."""
        with self._lock:
            if self._stream is not None:
                self._stream.close()
                self._stream = None

    def __enter__(self) -> FileWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()