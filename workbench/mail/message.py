"""Building raw RFC 822 style messages, plain or multipart with attachments."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from workbench.mail.config import SmtpConfig
from workbench.mail.utils import current_time_string, encode_header_utf8b

_boundary_counter = itertools.count(1)


@dataclass
class AttachmentInfo:
    """An attachment whose content is already Base64-encoded."""

    file_name: str
    content_type: str
    base64_content: str


@dataclass
class SimpleEmail:
    """A text message with optional attachments."""

    to: str = ""
    subject: str = ""
    body: str = ""
    attachments: list[AttachmentInfo] = field(default_factory=list)


def _next_boundary() -> str:
    return f"----=EmailBoundary_{next(_boundary_counter)}"


def wrap_base64_lines(data: str, line_length: int = 76) -> str:
    """Split ``data`` into CRLF-terminated lines of at most ``line_length`` characters."""
    return "".join(
        data[start:start + line_length] + "\r\n"
        for start in range(0, len(data), line_length)
    )


def build_message(cfg: SmtpConfig, mail: SimpleEmail) -> str:
    """Return the full message text, headers included, ready for DATA."""
    parts = [
        f"From: {cfg.from_address}\r\n",
        f"To: {mail.to}\r\n",
        f"Subject: {encode_header_utf8b(mail.subject)}\r\n",
        f"Date: {current_time_string()}\r\n",
    ]

    if not mail.attachments:
        parts += [
            "MIME-Version: 1.0\r\n",
            'Content-Type: text/plain; charset="UTF-8"\r\n',
            "Content-Transfer-Encoding: 8bit\r\n",
            "\r\n",
            mail.body,
        ]
        return "".join(parts)

    boundary = _next_boundary()
    parts += [
        "MIME-Version: 1.0\r\n",
        f'Content-Type: multipart/mixed; boundary="{boundary}"\r\n',
        "\r\n",
        "This is a multi-part message in MIME format.\r\n",
        "\r\n",
        f"--{boundary}\r\n",
        'Content-Type: text/plain; charset="UTF-8"\r\n',
        "Content-Transfer-Encoding: 8bit\r\n",
        "\r\n",
        f"{mail.body}\r\n",
    ]
    for att in mail.attachments:
        parts += [
            f"--{boundary}\r\n",
            f'Content-Type: {att.content_type}; name="{att.file_name}"\r\n',
            "Content-Transfer-Encoding: base64\r\n",
            f'Content-Disposition: attachment; filename="{att.file_name}"\r\n',
            "\r\n",
            wrap_base64_lines(att.base64_content),
            "\r\n",
        ]
    parts.append(f"--{boundary}--\r\n")
    return "".join(parts)