"""Small helpers shared by the mail tools: timestamps, Base64 and header encoding."""

from __future__ import annotations

import base64
import re
import time

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def current_time_string() -> str:
    """Return the local time as ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


def base64_encode(data: bytes | str) -> str:
    """Base64-encode bytes (text is encoded as UTF-8 first), with ``=`` padding."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("ascii")


def encode_header_utf8b(text: str) -> str:
    """Encode a header value as ``=?utf-8?B?...?=`` when it holds non-ASCII text.

    Pure ASCII text (and the empty string) is returned unchanged.
    """
    if not text or text.isascii():
        return text
    return "=?utf-8?B?" + base64_encode(text) + "?="


def normalize_newlines_to_crlf(text: str) -> str:
    """Turn every ``\\n``, ``\\r`` and ``\\r\\n`` into ``\\r\\n``."""
    return _NEWLINE_RE.sub("\r\n", text)