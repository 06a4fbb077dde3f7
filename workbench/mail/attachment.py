"""Turning files on disk into encoded mail attachments."""

from __future__ import annotations

from workbench.mail.message import AttachmentInfo
from workbench.mail.utils import base64_encode

_CONTENT_TYPES = (
    ((".txt",), "text/plain"),
    ((".html", ".htm"), "text/html"),
    ((".jpg", ".jpeg"), "image/jpeg"),
    ((".png",), "image/png"),
    ((".pdf",), "application/pdf"),
)


class AttachmentError(Exception):
    """Raised when an attachment file cannot be read."""


def extract_file_name(path: str) -> str:
    """Return the part after the last ``/`` or ``\\``; empty if the path ends with one."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def guess_content_type(file_name: str) -> str:
    """Guess a MIME type from the file extension, case-insensitively."""
    lower = file_name.lower()
    for suffixes, content_type in _CONTENT_TYPES:
        if lower.endswith(suffixes):
            return content_type
    return "application/octet-stream"


def attachment_from_file(file_path: str) -> AttachmentInfo:
    """Read ``file_path`` and return it as a Base64 attachment."""
    try:
        with open(file_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise AttachmentError(f"cannot open attachment file: {file_path}") from exc

    file_name = extract_file_name(file_path) or "attachment.bin"
    return AttachmentInfo(
        file_name=file_name,
        content_type=guess_content_type(file_name),
        base64_content=base64_encode(data),
    )