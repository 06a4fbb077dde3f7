"""System resource checks that mail an alert when something is wrong."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import psutil

from workbench.mail import maillog
from workbench.mail.config import SmtpConfig
from workbench.mail.message import SimpleEmail, build_message
from workbench.mail.smtp import SmtpClient, SmtpError
from workbench.mail.utils import current_time_string

_GIB = 1024.0 ** 3
_RULE = "-" * 32


def cpu_usage_percent(interval: float = 0.5) -> int:
    """Sample overall CPU use over ``interval`` seconds."""
    return int(psutil.cpu_percent(interval=interval))


def memory_usage_percent() -> int:
    """Return the share of physical memory in use."""
    return int(psutil.virtual_memory().percent)


def disk_free_gb(path: str | Path) -> float:
    """Free space on the disk holding ``path`` in GiB, or ``-1.0`` if unknown."""
    try:
        return psutil.disk_usage(str(path)).free / _GIB
    except OSError:
        return -1.0


def is_process_running(name: str) -> bool:
    """True if a running process name contains ``name``, ignoring case."""
    wanted = name.lower()
    for process in psutil.process_iter(["name"]):
        process_name = process.info.get("name") or ""
        if wanted in process_name.lower():
            return True
    return False


def build_report(
    cpu: int,
    memory: int,
    disks: Iterable[tuple[str, float]],
    process_name: str,
    process_running: bool,
    disk_threshold_gb: float,
    mem_threshold_percent: int,
    cpu_threshold_percent: int,
) -> tuple[str, int]:
    """Return the report text and the number of abnormal findings."""
    lines = ["=== Server resource monitoring report ===\n\n"]
    abnormal = 0

    if cpu > cpu_threshold_percent:
        abnormal += 1
        lines.append(f"⚠️ [CPU overload] current: {cpu}%\n")
    else:
        lines.append(f"✅ [CPU] normal: {cpu}%\n")

    if memory > mem_threshold_percent:
        abnormal += 1
        lines.append(f"⚠️ [Memory low] current: {memory}%\n")
    else:
        lines.append(f"✅ [Memory] normal: {memory}%\n")

    for drive, free in disks:
        if 0 <= free < disk_threshold_gb:
            abnormal += 1
            lines.append(f"⚠️ [Disk] {drive} low on space: {free:.6f} GB\n")

    if process_name:
        if process_running:
            lines.append(f"✅ [Process] service running: {process_name}\n")
        else:
            abnormal += 1
            lines.append(f"🛑 [Critical] key service not running: {process_name}\n")

    return "".join(lines), abnormal


def _send_alert(cfg: SmtpConfig, to: str, subject: str, content: str) -> None:
    raw = build_message(cfg, SimpleEmail(to=to, subject=subject, body=content))
    try:
        SmtpClient().send_mail(cfg, raw)
    except SmtpError as exc:
        maillog.error(f"alert mail sending failed: {exc}")
        raise
    maillog.info(f"alert triggered, mail sent to: {to}")


def check_and_alert(
    cfg: SmtpConfig,
    admin_email: str,
    disk_threshold_gb: float,
    mem_threshold_percent: int,
    cpu_threshold_percent: int,
    process_name: str = "",
) -> bool:
    """Check the system, print a report and mail it if anything is abnormal.

    Returns True when an alert was sent; raises :class:`SmtpError` if the alert
    could not be delivered.
    """
    cpu = cpu_usage_percent()
    memory = memory_usage_percent()
    disks = [
        (part.mountpoint, disk_free_gb(part.mountpoint))
        for part in psutil.disk_partitions()
    ]
    running = is_process_running(process_name) if process_name else False

    report, abnormal = build_report(
        cpu,
        memory,
        disks,
        process_name,
        running,
        disk_threshold_gb,
        mem_threshold_percent,
        cpu_threshold_percent,
    )

    print(f"\n{_RULE}")
    print(report, end="")
    print(_RULE)

    if not abnormal:
        print(">>> All system indicators normal.")
        return False

    print(">>> 🚨 Anomaly detected, sending alert mail...")
    subject = f"[Monitor alert] System anomaly - {current_time_string()}"
    _send_alert(cfg, admin_email, subject, report)
    return True