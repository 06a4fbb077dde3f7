"""Sending one templated message to every address in a recipients file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from workbench.mail import maillog
from workbench.mail.config import SmtpConfig
from workbench.mail.message import SimpleEmail, build_message
from workbench.mail.smtp import SmtpClient, SmtpError
from workbench.mail.template import render_template
from workbench.mail.utils import current_time_string

_WHITESPACE = " \t\n\r\f\v"


class BulkSendError(Exception):
    """Raised when input files are unusable or some messages were not sent."""


class _MailSender(Protocol):
    def send_mail(self, cfg: SmtpConfig, raw_message: str) -> None: ...


@dataclass(frozen=True)
class Recipient:
    """One address and the name used in the template."""

    email: str
    name: str = ""


def parse_recipient_line(line: str) -> Recipient | None:
    """Parse ``email,name``; return ``None`` for blank, comment or bad lines."""
    if not line or line.startswith("#"):
        return None
    email, sep, name = line.partition(",")
    if not sep:
        return None
    email = email.strip(_WHITESPACE)
    if not email:
        return None
    return Recipient(email, name.strip(_WHITESPACE))


def load_recipients(path: str | Path = "recipients.txt") -> list[Recipient]:
    """Read all valid recipients; malformed lines are logged and skipped."""
    try:
        with open(path, encoding="utf-8") as handle:
            lines = [line.rstrip("\n") for line in handle]
    except OSError as exc:
        raise BulkSendError(
            f"cannot open {path}; make sure it is in the working directory"
        ) from exc

    recipients = []
    for number, line in enumerate(lines, start=1):
        recipient = parse_recipient_line(line)
        if recipient is not None:
            recipients.append(recipient)
        elif line and not line.startswith("#"):
            maillog.error(
                f"failed to parse {path} line {number}, content: {line}"
            )

    if not recipients:
        raise BulkSendError(f"{path} holds no valid recipients")
    return recipients


def load_template(path: str | Path = "mail_template.txt") -> str:
    """Return the whole template text; an empty template is an error."""
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise BulkSendError(
            f"cannot open {path}; make sure it is in the working directory"
        ) from exc
    if not text:
        raise BulkSendError(f"{path} is empty")
    return text


def send_bulk_mails(
    cfg: SmtpConfig,
    recipients_path: str | Path = "recipients.txt",
    template_path: str | Path = "mail_template.txt",
    client: _MailSender | None = None,
) -> int:
    """Send the rendered template to every recipient.

    Returns the number of messages sent; raises :class:`BulkSendError` with a
    summary if any message failed.
    """
    try:
        recipients = load_recipients(recipients_path)
    except BulkSendError as exc:
        maillog.error(f"bulk: failed to load recipient list: {exc}")
        raise
    try:
        template = load_template(template_path)
    except BulkSendError as exc:
        maillog.error(f"bulk: failed to load template file: {exc}")
        raise

    maillog.info(f"bulk: starting, total recipients = {len(recipients)}")

    sender = client if client is not None else SmtpClient()
    succeeded = failed = 0
    for index, recipient in enumerate(recipients, start=1):
        variables = {
            "name": recipient.name,
            "index": str(index),
            "time": current_time_string(),
        }
        mail = SimpleEmail(
            to=recipient.email,
            subject=f"Bulk test mail #{index}",
            body=render_template(template, variables),
        )
        try:
            sender.send_mail(cfg, build_message(cfg, mail))
        except SmtpError as exc:
            failed += 1
            maillog.error(
                f"bulk: sending to {recipient.email} failed, error: {exc}"
            )
        else:
            succeeded += 1
            maillog.info(
                f"bulk: sent successfully to {recipient.email} (message {index})"
            )

    summary = (
        f"bulk finished: {succeeded} succeeded, {failed} failed, "
        f"{len(recipients)} total."
    )
    maillog.info(summary)
    if failed:
        raise BulkSendError(summary)
    return succeeded