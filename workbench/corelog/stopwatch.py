"""Elapsed-time measurement and a timer that logs how long a block took."""

from __future__ import annotations

import time
from types import TracebackType
from typing import Protocol


class _SupportsLog(Protocol):
    def log(self, message: str, source_class: str) -> None: ...


class Stopwatch:
    """Measures time between :meth:`start` and :meth:`stop`, or up to now while running."""

    def __init__(self) -> None:
        self._start = 0.0
        self._stop = 0.0
        self.running = False

    def start(self) -> None:
        """Begin timing from now."""
        self._start = time.perf_counter()
        self.running = True

    def stop(self) -> None:
        """Freeze the measured interval."""
        self._stop = time.perf_counter()
        self.running = False

    @property
    def elapsed_seconds(self) -> float:
        """Seconds measured so far."""
        end = time.perf_counter() if self.running else self._stop
        return end - self._start

    @property
    def elapsed_milliseconds(self) -> int:
        """Whole milliseconds measured so far."""
        return int(self.elapsed_seconds * 1000)


class ScopedTimer:
    """Context manager that logs ``<context> executed in <n>ms.`` when it exits."""

    def __init__(
        self,
        logger: _SupportsLog | None,
        source_class: str,
        context_message: str,
    ) -> None:
        self.logger = logger
        self.source_class = source_class
        self.context_message = context_message
        self.stopwatch = Stopwatch()
        self.stopwatch.start()

    def __enter__(self) -> ScopedTimer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stopwatch.stop()
        if self.logger is not None:
            self.logger.log(
                f"{self.context_message} executed in "
                f"{self.stopwatch.elapsed_milliseconds}ms.",
                self.source_class,
            )