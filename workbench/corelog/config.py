"""Process-wide settings for the core logger."""

from __future__ import annotations

import threading

from workbench.corelog.entry import LogLevel

DEFAULT_LOG_PATH = "./logs"
DEFAULT_RETENTION_DAYS = 7


class LogConfig:
    """Minimum level, retention period and log directory, safe to share between threads."""

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        log_file_path: str = DEFAULT_LOG_PATH,
    ) -> None:
        self._lock = threading.Lock()
        self._min_level = min_level
        self._retention_days = max(retention_days, 0)
        self._log_file_path = log_file_path

    @property
    def min_level(self) -> LogLevel:
        """Entries below this level are dropped; NONE drops everything."""
        with self._lock:
            return self._min_level

    @min_level.setter
    def min_level(self, level: LogLevel) -> None:
        with self._lock:
            self._min_level = LogLevel(level)

    @property
    def retention_days(self) -> int:
        """Age in days after which rolled log files are deleted; 0 keeps them."""
        with self._lock:
            return self._retention_days

    @retention_days.setter
    def retention_days(self, days: int) -> None:
        # Negative values are ignored and keep the previous setting.
        if days >= 0:
            with self._lock:
                self._retention_days = days

    @property
    def log_file_path(self) -> str:
        """Directory that holds the log files."""
        with self._lock:
            return self._log_file_path

    @log_file_path.setter
    def log_file_path(self, path: str) -> None:
        with self._lock:
            self._log_file_path = path


_CONFIG = LogConfig()


def get_config() -> LogConfig:
    """Return the shared configuration."""
    return _CONFIG