import io

import pytest

from workbench.mail import maillog
from workbench.mail.stats import (
    EmailStatistics,
    RecipientStat,
    StatsError,
    collect_statistics,
    extract_recipient,
    show_statistics,
)

SUCCESS_SINGLE = (
    "[2025-01-01 10:00:00][INFO] mail sent successfully, "
    "To=alice@example.com, Subject=Hi"
)
FAIL_SINGLE = "[2025-01-01 10:05:00][ERROR] simple mail sending failed: timeout"
BULK_OK = (
    "[2025-01-02 09:00:00][INFO] bulk: sent successfully to bob@example.com "
    "(message 1)"
)
BULK_FAIL = (
    "[2025-01-02 09:01:00][ERROR] bulk: sending to carol@example.com failed, "
    "error: refused"
)
NOISE = "[2025-01-02 09:02:00][INFO] SMTP config loaded."


@pytest.mark.parametrize(
    "line, expected",
    [
        (SUCCESS_SINGLE, "alice@example.com"),
        (BULK_OK, "bob@example.com"),
        (BULK_FAIL, "carol@example.com"),
        (NOISE, ""),
    ],
)
def test_extract_recipient(line, expected):
    assert extract_recipient(line) == expected


def test_collect_counts_each_kind():
    counted = [SUCCESS_SINGLE, FAIL_SINGLE, BULK_OK, BULK_FAIL]
    stats = collect_statistics(counted + [NOISE, ""])
    assert (
        stats.single_success,
        stats.single_fail,
        stats.bulk_success,
        stats.bulk_fail,
    ) == (1, 1, 1, 1)
    assert stats.total_attempts == len(counted)
    assert stats.total_attempts == stats.total_success + stats.total_fail
    assert stats.last_send_time == "2025-01-02 09:01:00"


def test_collect_per_recipient():
    stats = collect_statistics([SUCCESS_SINGLE, FAIL_SINGLE, BULK_OK, BULK_FAIL])
    assert sorted(stats.recipients) == [
        "alice@example.com",
        "bob@example.com",
        "carol@example.com",
    ]
    assert stats.recipients["carol@example.com"] == RecipientStat(
        success=0, fail=1, last_time="2025-01-02 09:01:00"
    )


def test_repeated_recipient_keeps_latest_time():
    later = SUCCESS_SINGLE.replace("2025-01-01 10:00:00", "2025-03-03 12:00:00")
    stats = collect_statistics([SUCCESS_SINGLE, later])
    entry = stats.recipients["alice@example.com"]
    assert entry.success == stats.total_success
    assert entry.last_time == "2025-03-03 12:00:00"


def test_bulk_line_without_failed_is_ignored():
    line = "[2025-01-02 09:01:00][INFO] bulk: sending to dave@example.com now"
    assert collect_statistics([line]) == EmailStatistics()


def test_log_written_by_logger_is_counted(tmp_path):
    log_path = tmp_path / "email.log"
    maillog.info("mail sent successfully, To=erin@example.com, Subject=X", log_path)
    maillog.error("bulk: sending to frank@example.com failed, error: y", log_path)
    stats = show_statistics(log_path, io.StringIO())
    assert set(stats.recipients) == {"erin@example.com", "frank@example.com"}
    assert stats.total_success == stats.single_success
    assert stats.total_fail == stats.bulk_fail


def test_show_statistics_prints_sorted_recipients(tmp_path):
    log_path = tmp_path / "email.log"
    log_path.write_text("\n".join([BULK_OK, SUCCESS_SINGLE]) + "\n", encoding="utf-8")
    out = io.StringIO()
    show_statistics(log_path, out)
    text = out.getvalue()
    assert "Per recipient" in text
    assert text.index("alice@example.com") < text.index("bob@example.com")


def test_show_statistics_empty_log(tmp_path):
    log_path = tmp_path / "email.log"
    log_path.write_text(NOISE + "\n", encoding="utf-8")
    out = io.StringIO()
    stats = show_statistics(log_path, out)
    assert stats.total_attempts == 0
    assert "No sending records" in out.getvalue()


def test_show_statistics_missing_log(tmp_path):
    with pytest.raises(StatsError):
        show_statistics(tmp_path / "absent.log", io.StringIO())