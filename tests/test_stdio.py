import io
import os

import pytest

from workbench.mail import stdio
from workbench.mail.bulk import load_recipients, load_template
from workbench.mail.config import load_smtp_config
from workbench.mail.template import render_template


def _run(text):
    out = io.StringIO()
    code = stdio.run(io.StringIO(text), out)
    return code, out.getvalue().splitlines()


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", []),
        ("QUIT", ["QUIT"]),
        ("SEND_SIMPLE|a|b|c", ["SEND_SIMPLE", "a", "b", "c"]),
        ("a|", ["a"]),
        ("a||", ["a", ""]),
        ("|a", ["", "a"]),
    ],
)
def test_split_pipe(line, expected):
    assert stdio.split_pipe(line) == expected


def test_description():
    assert stdio.description() == "Email Module"


def test_default_files_load(tmp_path):
    paths = stdio.write_default_files(tmp_path)
    assert [p.name for p in paths] == ["email.conf", "recipients.txt", "mail_template.txt"]

    cfg = load_smtp_config(tmp_path / "email.conf")
    assert cfg.server_ip == "127.0.0.1"
    assert cfg.port == 2525
    assert cfg.use_auth is False
    assert cfg.max_retry == 1

    recipients = load_recipients(tmp_path / "recipients.txt")
    assert [r.email for r in recipients] == ["alice@example.com", "bob@example.com"]

    template = load_template(tmp_path / "mail_template.txt")
    assert template == stdio.DEFAULT_MAIL_TEMPLATE
    rendered = render_template(template, {"name": "Ann", "index": "1"})
    assert "${" not in rendered
    assert "Ann" in rendered


def test_quit_and_cwd_restored():
    before = os.getcwd()
    code, lines = _run("QUIT\n")
    assert code == 0
    assert lines == [stdio.READY, stdio.BYE]
    assert os.getcwd() == before


def test_exit_alias_and_blank_lines():
    code, lines = _run("\n\nEXIT\nSHOW_STATS\n")
    assert lines == [stdio.READY, stdio.BYE]


def test_unknown_command_and_missing_args():
    code, lines = _run("HELLO\nSEND_SIMPLE|bob@example.com\nQUIT\n")
    assert lines == [stdio.READY, stdio.UNKNOWN, stdio.NEED_ARGS, stdio.BYE]


def test_end_of_input_without_quit():
    code, lines = _run("NOPE\n")
    assert code == 0
    assert lines == [stdio.READY, stdio.UNKNOWN]


def test_stats_fail_then_succeed(capsys):
    code, lines = _run("SHOW_STATS\nSHOW_STATS\nQUIT\n")
    assert lines[0] == stdio.READY
    assert lines[1].startswith("ERR|")
    assert "email.log" in lines[1]
    assert lines[2] == "OK|STATS_SHOWN"
    assert lines[-1] == stdio.BYE


def test_search_log_after_error(capsys):
    code, lines = _run("SEARCH_LOG|anything\nSEARCH_LOG|via API\nQUIT\n")
    assert lines[1].startswith("ERR|")
    assert lines[2] == "OK|SEARCH_DONE"
    assert "via API" in capsys.readouterr().out


def test_scratch_files_removed():
    before = set(os.listdir(os.getcwd()))
    code, lines = _run("QUIT\n")
    assert code == 0
    assert lines == [stdio.READY, stdio.BYE]
    assert set(os.listdir(os.getcwd())) == before


def test_main_uses_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("QUIT\n"))
    assert stdio.main([]) == 0
    assert capsys.readouterr().out.splitlines() == [stdio.READY, stdio.BYE]