"""SMTP settings and the ``email.conf`` loader."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

_WHITESPACE = " \t\n\r\f\v"
_INT_RE = re.compile(r"[ \t\n\r\f\v]*([+-]?[0-9]+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ConfigError(Exception):
    """Raised when the SMTP configuration is missing or invalid."""


@dataclass
class SmtpConfig:
    """Connection and sender settings for the SMTP client."""

    server_ip: str = ""
    port: int = 25
    from_address: str = ""
    username: str = ""
    password: str = ""
    use_auth: bool = False
    io_timeout_ms: int = 5000
    max_retry: int = 1


def _parse_int(value: str, key: str) -> int:
    match = _INT_RE.match(value)
    if not match:
        raise ConfigError(f"invalid value for {key} in configuration")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ConfigError(f"invalid value for {key} in configuration")
    return number


def parse_smtp_config(lines: Iterable[str]) -> SmtpConfig:
    """Build an :class:`SmtpConfig` from ``key=value`` lines.

    Blank lines, ``#`` comments and lines without ``=`` are skipped; unknown
    keys are ignored.
    """
    cfg = SmtpConfig()
    for raw in lines:
        line = raw.strip(_WHITESPACE)
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip(_WHITESPACE)
        value = value.strip(_WHITESPACE)

        if key == "server_ip":
            cfg.server_ip = value
        elif key == "port":
            cfg.port = _parse_int(value, "port")
        elif key == "from_address":
            cfg.from_address = value
        elif key == "username":
            cfg.username = value
        elif key == "password":
            cfg.password = value
        elif key == "use_auth":
            cfg.use_auth = value.lower() in ("1", "true", "yes")
        elif key == "io_timeout_ms":
            cfg.io_timeout_ms = max(_parse_int(value, "io_timeout_ms"), 0)
        elif key == "max_retry":
            cfg.max_retry = max(_parse_int(value, "max_retry"), 1)

    if not cfg.server_ip:
        raise ConfigError("configuration is missing server_ip")
    if not cfg.from_address:
        raise ConfigError("configuration is missing from_address")
    if cfg.use_auth and (not cfg.username or not cfg.password):
        raise ConfigError("use_auth is enabled but username or password is empty")
    return cfg


def load_smtp_config(path: str | Path = "email.conf") -> SmtpConfig:
    """Read and parse the configuration file at ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            return parse_smtp_config(handle)
    except OSError as exc:
        raise ConfigError(
            f"cannot open configuration file {path}; make sure it exists"
        ) from exc