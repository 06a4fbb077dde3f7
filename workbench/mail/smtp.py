"""A small SMTP client that sends one prepared message per call."""

from __future__ import annotations

import socket
from contextlib import closing

from workbench.mail.config import SmtpConfig
from workbench.mail.utils import base64_encode

_RECV_SIZE = 511
_DATA_TERMINATOR = "\r\n.\r\n"


class SmtpError(Exception):
    """Raised when a message cannot be delivered to the SMTP server."""


def extract_to_address(raw: str) -> str:
    """Return the recipient address from the first ``To:`` header of ``raw``.

    An address in angle brackets is taken from between them; otherwise the
    whole header value is used. Returns an empty string when there is no
    ``To:`` header.
    """
    pos = raw.find("To:")
    if pos == -1:
        return ""
    pos += 3
    while pos < len(raw) and raw[pos] in " \t":
        pos += 1

    end = raw.find("\n", pos)
    line = raw[pos:] if end == -1 else raw[pos:end]

    lt = line.find("<")
    gt = line.find(">")
    if lt != -1 and gt != -1 and gt > lt + 1:
        addr = line[lt + 1:gt]
    else:
        addr = line
    return addr.lstrip(" \t").rstrip(" \t\r")


def _connect(host: str, port: int) -> socket.socket:
    try:
        infos = socket.getaddrinfo(
            host, port, 0, socket.SOCK_STREAM, socket.IPPROTO_TCP
        )
    except socket.gaierror as exc:
        raise SmtpError(f"getaddrinfo failed, error code: {exc.errno}") from exc

    for family, sock_type, proto, _, address in infos:
        try:
            sock = socket.socket(family, sock_type, proto)
        except OSError:
            continue
        try:
            sock.connect(address)
        except OSError:
            sock.close()
            continue
        return sock
    raise SmtpError("cannot connect to SMTP server")


def _send_all(sock: socket.socket, data: str) -> None:
    try:
        sock.sendall(data.encode("utf-8"))
    except OSError as exc:
        raise SmtpError(f"failed to send data: {exc}") from exc


def _read_response(sock: socket.socket) -> tuple[int, str]:
    """Read until a CRLF arrives; return the first line's code and all text read."""
    buffer = b""
    while True:
        try:
            chunk = sock.recv(_RECV_SIZE)
        except OSError as exc:
            raise SmtpError(f"failed to receive data: {exc}") from exc
        if not chunk:
            raise SmtpError("failed to receive data: server closed the connection")
        buffer += chunk
        if b"\r\n" in buffer:
            text = buffer.decode("utf-8", errors="replace")
            first = text.split("\r\n", 1)[0]
            digits = first[:3]
            code = (
                int(digits)
                if len(digits) == 3 and digits.isascii() and digits.isdigit()
                else 0
            )
            return code, text


def _command(sock: socket.socket, command: str, expect_class: int) -> None:
    _send_all(sock, command + "\r\n")
    code, text = _read_response(sock)
    if code // 100 != expect_class:
        raise SmtpError(f"SMTP error ({code}): {text}")


def _authenticate(sock: socket.socket, cfg: SmtpConfig) -> None:
    _command(sock, "AUTH LOGIN", 3)
    _command(sock, base64_encode(cfg.username), 3)
    _command(sock, base64_encode(cfg.password), 2)


def _send_once(cfg: SmtpConfig, raw_message: str) -> None:
    with closing(_connect(cfg.server_ip, cfg.port)) as sock:
        if cfg.io_timeout_ms > 0:
            sock.settimeout(cfg.io_timeout_ms / 1000)

        code, text = _read_response(sock)
        if code // 100 != 2:
            raise SmtpError(f"SMTP server returned an error: {text}")

        _command(sock, "EHLO localhost", 2)
        if cfg.use_auth:
            _authenticate(sock, cfg)

        _command(sock, f"MAIL FROM:<{cfg.from_address}>", 2)

        to_addr = extract_to_address(raw_message)
        if not to_addr:
            raise SmtpError("cannot find the recipient (To) in the message")
        _command(sock, f"RCPT TO:<{to_addr}>", 2)

        _command(sock, "DATA", 3)
        data = raw_message
        if not data.endswith(_DATA_TERMINATOR):
            data += _DATA_TERMINATOR
        _send_all(sock, data)

        code, text = _read_response(sock)
        if code // 100 != 2:
            raise SmtpError(f"failed to send mail: {text}")

        try:
            _command(sock, "QUIT", 2)
        except SmtpError:
            pass


class SmtpClient:
    """Delivers raw messages over SMTP, retrying as the configuration allows."""

    def send_mail(self, cfg: SmtpConfig, raw_message: str) -> None:
        """Send ``raw_message``; raise :class:`SmtpError` if every attempt fails."""
        attempts = max(cfg.max_retry, 1)
        last_error: SmtpError | None = None
        for _ in range(attempts):
            try:
                _send_once(cfg, raw_message)
                return
            except SmtpError as exc:
                last_error = exc

        if attempts > 1:
            raise SmtpError(
                f"failed to send mail after {attempts} attempts. "
                f"Last error: {last_error}"
            ) from last_error
        raise SmtpError(str(last_error)) from last_error