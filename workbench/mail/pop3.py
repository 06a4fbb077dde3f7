"""A minimal POP3 check that asks the server how many messages it holds."""

from __future__ import annotations

import socket
from contextlib import closing

_RECV_SIZE = 1023


class Pop3Error(Exception):
    """Raised when the POP3 server cannot be reached or refuses a command."""


def _connect(host: str, port: int) -> socket.socket:
    try:
        infos = socket.getaddrinfo(
            host, port, 0, socket.SOCK_STREAM, socket.IPPROTO_TCP
        )
    except socket.gaierror as exc:
        raise Pop3Error(f"DNS resolution failed: {host}") from exc

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
    raise Pop3Error("cannot connect to server")


def _recv(sock: socket.socket) -> str:
    """Read one chunk; an empty string means nothing arrived."""
    try:
        data = sock.recv(_RECV_SIZE)
    except OSError:
        return ""
    return data.decode("utf-8", errors="replace")


def _send(sock: socket.socket, text: str) -> bool:
    try:
        sock.sendall(text.encode("utf-8"))
    except OSError:
        return False
    return True


def _send_and_check(sock: socket.socket, command: str) -> None:
    if not _send(sock, command + "\r\n"):
        raise Pop3Error(f"failed to send command: {command}")
    response = _recv(sock)
    if not response:
        raise Pop3Error("no response from server")
    if not response.startswith("+OK"):
        raise Pop3Error(f"server error: {response}")


def check_email_count(host: str, port: int = 110) -> str:
    """Log in, run STAT and return a short report holding the server's reply."""
    with closing(_connect(host, port)) as sock:
        _recv(sock)
        _send_and_check(sock, "USER test")
        _send_and_check(sock, "PASS test")

        _send(sock, "STAT\r\n")
        stat_response = _recv(sock)
        if not stat_response.startswith("+OK"):
            raise Pop3Error(f"query failed: {stat_response}")

        _send(sock, "QUIT\r\n")

    return (
        "Connected!\n[server response] "
        + stat_response
        + "(format: message count, total bytes)\n"
        "Open the mail server's web page for details."
    )