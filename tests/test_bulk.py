import pytest

from workbench.mail.bulk import (
    BulkSendError,
    Recipient,
    load_recipients,
    load_template,
    parse_recipient_line,
    send_bulk_mails,
)
from workbench.mail.config import SmtpConfig
from workbench.mail.smtp import SmtpError
from workbench.mail.stats import collect_statistics


class FakeClient:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    def send_mail(self, cfg, raw_message):
        if any(f"To: {address}\r\n" in raw_message for address in self.failing):
            raise SmtpError("rejected")
        self.sent.append(raw_message)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cfg():
    return SmtpConfig(server_ip="127.0.0.1", from_address="sender@example.com")


def write_inputs(directory, recipients, template="Hello ${name}, mail ${index}"):
    (directory / "recipients.txt").write_text(recipients, encoding="utf-8")
    (directory / "mail_template.txt").write_text(template, encoding="utf-8")


@pytest.mark.parametrize(
    "line, expected",
    [
        (" alice@example.com , Alice ", Recipient("alice@example.com", "Alice")),
        ("bob@example.com,", Recipient("bob@example.com", "")),
        ("", None),
        ("# comment,x", None),
        ("no-comma-here", None),
        ("   ,Nobody", None),
    ],
)
def test_parse_recipient_line(line, expected):
    assert parse_recipient_line(line) == expected


def test_load_recipients_logs_bad_lines(workdir):
    (workdir / "recipients.txt").write_text(
        "# list\nbroken line\nalice@example.com,Alice\n\n", encoding="utf-8"
    )
    assert load_recipients() == [Recipient("alice@example.com", "Alice")]
    log = (workdir / "email.log").read_text(encoding="utf-8")
    assert "line 2" in log
    assert "broken line" in log


def test_load_recipients_errors(workdir):
    with pytest.raises(BulkSendError):
        load_recipients()
    (workdir / "recipients.txt").write_text("# only a comment\n", encoding="utf-8")
    with pytest.raises(BulkSendError):
        load_recipients()


def test_load_template(workdir):
    (workdir / "mail_template.txt").write_text("Dear ${name}", encoding="utf-8")
    assert load_template() == "Dear ${name}"
    (workdir / "mail_template.txt").write_text("", encoding="utf-8")
    with pytest.raises(BulkSendError):
        load_template()


def test_send_bulk_mails_renders_each_message(workdir, cfg):
    write_inputs(workdir, "alice@example.com,Alice\nbob@example.com,Bob\n")
    client = FakeClient()
    assert send_bulk_mails(cfg, client=client) == len(client.sent)
    first, second = client.sent
    assert "Hello Alice, mail 1" in first
    assert "Subject: Bulk test mail #1\r\n" in first
    assert "Hello Bob, mail 2" in second
    assert "To: bob@example.com\r\n" in second


def test_send_bulk_mails_reports_failures(workdir, cfg):
    write_inputs(workdir, "alice@example.com,Alice\nbob@example.com,Bob\n")
    client = FakeClient(failing=["bob@example.com"])
    with pytest.raises(BulkSendError, match="failed"):
        send_bulk_mails(cfg, client=client)
    lines = (workdir / "email.log").read_text(encoding="utf-8").splitlines()
    stats = collect_statistics(lines)
    assert stats.recipients["alice@example.com"].success == len(client.sent)
    assert stats.bulk_fail == stats.total_fail
    assert "bob@example.com" in stats.recipients


def test_send_bulk_mails_missing_files(workdir, cfg):
    with pytest.raises(BulkSendError):
        send_bulk_mails(cfg, client=FakeClient())
    assert "failed to load recipient list" in (workdir / "email.log").read_text(
        encoding="utf-8"
    )