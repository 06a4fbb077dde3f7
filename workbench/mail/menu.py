"""Interactive console menu for the mail tools."""

from __future__ import annotations

import argparse
import re
import sys
from typing import TextIO

from workbench.mail import maillog
from workbench.mail.attachment import AttachmentError, attachment_from_file
from workbench.mail.bulk import BulkSendError, send_bulk_mails
from workbench.mail.config import ConfigError, SmtpConfig, load_smtp_config
from workbench.mail.logsearch import LogSearchError, show_search
from workbench.mail.message import SimpleEmail, build_message
from workbench.mail.monitor import check_and_alert
from workbench.mail.smtp import SmtpClient, SmtpError
from workbench.mail.stats import StatsError, show_statistics

MENU_TITLE = "===== Email management module - Level 1 & bulk ====="
CONFIG_FAILED = "Failed to load SMTP configuration:"
CONFIG_LOADED = "SMTP configuration loaded."
EXIT_MESSAGE = "Exiting."
INVALID_OPTION = "Invalid option, please try again."
SEARCH_CANCELLED = "Keyword is empty, search cancelled."
ATTACHMENT_FAILED = "Failed to build attachment:"
SEND_OK = "Mail sent successfully!"
SEND_FAILED = "Mail sending failed:"
MONITOR_DONE = "Monitoring cycle finished."

DISK_THRESHOLD_GB = 20.0
MEM_THRESHOLD_PERCENT = 90
CPU_THRESHOLD_PERCENT = 80

_INT_RE = re.compile(r"[ \t\n\r\f\v]*([+-]?[0-9]+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_MENU = (
    f"\n{MENU_TITLE}\n"
    "1. Send a single test mail\n"
    "2. Send bulk test mail from recipients.txt\n"
    "3. Show sending statistics\n"
    "4. Send a single mail with an attachment\n"
    "5. Search the log (email.log) by keyword\n"
    "6. Start system resource monitoring\n"
    "0. Exit\n"
    "Your choice: "
)


class _EndOfInput(Exception):
    """The input stream ran out."""


def read_int_choice(line: str) -> int:
    """Parse a leading integer from ``line``; return -1 if there is none."""
    match = _INT_RE.match(line)
    if not match:
        return -1
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        return -1
    return number


class _Console:
    def __init__(self, input_stream: TextIO, out: TextIO) -> None:
        self.input = input_stream
        self.out = out

    def say(self, text: str) -> None:
        self.out.write(text + "\n")

    def ask(self, prompt: str) -> str:
        self.out.write(prompt)
        self.out.flush()
        raw = self.input.readline()
        if not raw:
            raise _EndOfInput
        return raw.rstrip("\r\n")


def _ask_mail(console: _Console) -> SimpleEmail:
    to = console.ask("Recipient address (To): ")
    subject = console.ask("Subject: ")
    body = console.ask("Body (single line): ")
    return SimpleEmail(to=to, subject=subject, body=body)


def _send_single(cfg: SmtpConfig, console: _Console) -> None:
    mail = _ask_mail(console)
    raw = build_message(cfg, mail)
    console.say("Sending mail, please wait...")
    try:
        SmtpClient().send_mail(cfg, raw)
    except SmtpError as exc:
        console.say(f"{SEND_FAILED}\n{exc}")
        maillog.error(f"mail sending failed: {exc}")
        return
    console.say(SEND_OK)
    maillog.info(f"mail sent successfully, To={mail.to}, Subject={mail.subject}")


def _send_bulk(cfg: SmtpConfig, console: _Console) -> None:
    console.say(
        "About to send bulk test mail using recipients.txt and mail_template.txt..."
    )
    try:
        send_bulk_mails(cfg)
    except BulkSendError as exc:
        console.say(f"Bulk sending finished with errors:\n{exc}")
        maillog.error(f"bulk finished with errors - {exc}")
        return
    console.say("Bulk sending finished: all recipients succeeded.")
    maillog.info("bulk finished: all recipients sent successfully.")


def _show_stats(cfg: SmtpConfig, console: _Console) -> None:
    try:
        show_statistics(out=console.out)
    except StatsError as exc:
        console.say(f"Statistics failed:\n{exc}")
        maillog.error(f"statistics failed: {exc}")


def _send_with_attachment(cfg: SmtpConfig, console: _Console) -> None:
    mail = _ask_mail(console)
    file_path = console.ask(
        "Attachment file path (for example: C:\\test\\attach.txt): "
    )
    try:
        attachment = attachment_from_file(file_path)
    except AttachmentError as exc:
        console.say(f"{ATTACHMENT_FAILED}\n{exc}")
        maillog.error(f"failed to build attachment: {exc}")
        return

    mail.attachments.append(attachment)
    raw = build_message(cfg, mail)
    console.say("Sending mail with attachment, please wait...")
    try:
        SmtpClient().send_mail(cfg, raw)
    except SmtpError as exc:
        console.say(f"{SEND_FAILED}\n{exc}")
        maillog.error(f"attachment mail sending failed: {exc}")
        return
    console.say(SEND_OK)
    maillog.info(
        f"attachment mail sent successfully, To={mail.to}, "
        f"Subject={mail.subject}, Attachment={attachment.file_name}"
    )


def _search(cfg: SmtpConfig, console: _Console) -> None:
    keyword = console.ask("Keyword to search for: ")
    if not keyword:
        console.say(SEARCH_CANCELLED)
        return
    start = console.ask(
        "Optional start time (YYYY-MM-DD or YYYY-MM-DD HH:MM:SS, Enter for none): "
    )
    end = console.ask("Optional end time (same format, Enter for none): ")
    try:
        show_search(keyword, start, end, out=console.out)
    except LogSearchError as exc:
        console.say(f"Log search failed:\n{exc}")
        maillog.error(f"log search failed: {exc}")


def _monitor(cfg: SmtpConfig, console: _Console) -> None:
    console.say("=== System monitoring center v3.0 ===")
    entered = console.ask(
        f"Alert recipient address (Enter for default: {cfg.from_address}): "
    )
    admin_email = entered or cfg.from_address
    process_name = console.ask(
        "Key process name to watch (for example notepad.exe, Enter to skip): "
    )
    console.say("Initialising probes (sampling CPU, about 0.5 seconds)...")
    try:
        check_and_alert(
            cfg,
            admin_email,
            DISK_THRESHOLD_GB,
            MEM_THRESHOLD_PERCENT,
            CPU_THRESHOLD_PERCENT,
            process_name,
        )
    except SmtpError as exc:
        console.say(f"Monitoring error: {exc}")
        return
    console.say(MONITOR_DONE)


_ACTIONS = {
    1: _send_single,
    2: _send_bulk,
    3: _show_stats,
    4: _send_with_attachment,
    5: _search,
    6: _monitor,
}


def run_menu(input_stream: TextIO | None = None, out: TextIO | None = None) -> None:
    """Run the menu loop until the user picks 0 or the input ends."""
    console = _Console(
        input_stream if input_stream is not None else sys.stdin,
        out if out is not None else sys.stdout,
    )
    try:
        cfg = load_smtp_config()
    except ConfigError as exc:
        console.say(f"{CONFIG_FAILED}\n{exc}")
        maillog.error(f"failed to load config: {exc}")
        console.say(
            "Create email.conf in the working directory, then start again."
        )
        try:
            console.ask("Press Enter to exit...")
        except _EndOfInput:
            pass
        return

    maillog.info(CONFIG_LOADED)

    try:
        while True:
            choice = read_int_choice(console.ask(_MENU))
            if choice == 0:
                console.say(EXIT_MESSAGE)
                return
            action = _ACTIONS.get(choice)
            if action is None:
                console.say(INVALID_OPTION)
            else:
                action(cfg, console)
    except _EndOfInput:
        return


def main(argv: list[str] | None = None) -> int:
    """Start the interactive mail menu on the console."""
    parser = argparse.ArgumentParser(description="Interactive mail tool menu.")
    parser.parse_args(argv)
    run_menu(sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())