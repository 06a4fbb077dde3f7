"""High-level mail operations driven by the files in the working directory."""

from __future__ import annotations

from workbench.mail import bulk, maillog
from workbench.mail.bulk import BulkSendError
from workbench.mail.config import ConfigError, SmtpConfig, load_smtp_config
from workbench.mail.logsearch import LogMatch, LogSearchError, show_search
from workbench.mail.message import SimpleEmail, build_message
from workbench.mail.pop3 import check_email_count
from workbench.mail.smtp import SmtpClient, SmtpError
from workbench.mail.stats import EmailStatistics, StatsError
from workbench.mail.stats import show_statistics as _show_statistics

POP3_PORT = 110


def _load_config() -> SmtpConfig:
    try:
        return load_smtp_config()
    except ConfigError as exc:
        maillog.error(f"failed to load SMTP config: {exc}")
        raise


def send_simple_mail(to: str, subject: str, body: str) -> None:
    """Send one plain text message using ``email.conf``."""
    cfg = _load_config()
    raw = build_message(cfg, SimpleEmail(to=to, subject=subject, body=body))
    try:
        SmtpClient().send_mail(cfg, raw)
    except SmtpError as exc:
        maillog.error(f"simple mail sending failed: {exc}")
        raise
    maillog.info(f"simple mail sent successfully, To={to}, Subject={subject}")


def send_bulk_mails() -> int:
    """Send the bulk mailing described by the files in the working directory."""
    cfg = _load_config()
    try:
        count = bulk.send_bulk_mails(cfg)
    except BulkSendError as exc:
        maillog.error(f"bulk finished with errors (via API) - {exc}")
        raise
    maillog.info("bulk finished: all recipients sent successfully (via API).")
    return count


def show_statistics() -> EmailStatistics:
    """Print the sending statistics from ``email.log``."""
    try:
        return _show_statistics()
    except StatsError as exc:
        maillog.error(f"statistics failed (via API): {exc}")
        raise


def search_log(
    keyword: str, start_time: str = "", end_time: str = ""
) -> list[LogMatch]:
    """Print and return the lines of ``email.log`` that match ``keyword``."""
    try:
        return show_search(keyword, start_time, end_time)
    except LogSearchError as exc:
        maillog.error(f"log search failed (via API): {exc}")
        raise


def check_inbox() -> str:
    """Ask the POP3 server on the configured host how many messages it holds."""
    cfg = _load_config()
    return check_email_count(cfg.server_ip, POP3_PORT)