"""Stack trace text and a hook that logs unhandled exceptions as FATAL."""

from __future__ import annotations

import sys
import threading
import traceback
from collections.abc import Sequence
from types import TracebackType
from typing import Any, Protocol

CRASH_SOURCE = "CRASH_HANDLER"
MAX_FRAMES = 100

_FOOTER = "-" * 50 + "\n"


class _SupportsFatal(Protocol):
    def fatal(self, message: str, source_class: str) -> Any: ...


_logger: _SupportsFatal | None = None


def _format_frames(frames: Sequence[traceback.FrameSummary]) -> str:
    """Format frames given innermost first."""
    frames = list(frames)[:MAX_FRAMES]
    lines = [f"\n--- Full Stack Trace (Capturing {len(frames)} Frames) ---\n"]
    for index, frame in enumerate(frames):
        lines.append(
            f"Frame {index:02d}: {frame.name} ({frame.filename}:{frame.lineno})\n"
        )
    lines.append(_FOOTER)
    return "".join(lines)


def format_stack() -> str:
    """Return the calling thread's stack, innermost frame first."""
    return _format_frames(traceback.extract_stack()[::-1])


def _report(
    exc_type: type[BaseException],
    exc: BaseException | None,
    tb: TracebackType | None,
) -> None:
    logger = _logger
    if logger is None:
        return
    logger.fatal(
        f"UNHANDLED EXCEPTION ({exc_type.__name__}: {exc}). "
        "Attempting to generate stack trace before crash.",
        CRASH_SOURCE,
    )
    if tb is not None:
        stack = _format_frames(traceback.extract_tb(tb)[::-1])
    else:
        stack = format_stack()
    logger.fatal(stack, CRASH_SOURCE)


def _excepthook(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    try:
        _report(exc_type, exc, tb)
    finally:
        sys.__excepthook__(exc_type, exc, tb)


def _thread_excepthook(args: Any) -> None:
    try:
        _report(args.exc_type, args.exc_value, args.exc_traceback)
    finally:
        threading.__excepthook__(args)


def install_exception_hook(logger: _SupportsFatal) -> None:
    """Log every unhandled exception, in any thread, to ``logger`` at FATAL.

    The default handling still runs afterwards. Installing again replaces the
    logger.
    """
    global _logger
    _logger = logger
    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook