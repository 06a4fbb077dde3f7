"""A quota-limited virtual disk kept in a directory, with a small command shell."""

from __future__ import annotations

import argparse
import base64
import os
import shutil
import sys
import tempfile
import time
from collections import deque
from pathlib import Path
from typing import TextIO

LOG_FILE = "system_log.txt"
ENCRYPTED_MARKER = b"[ENCRYPTED]"
DEFAULT_QUOTA = 5000
DEFAULT_ROOT = Path(tempfile.gettempdir()) / "MyVirtualDisk"

_BASE64_ALPHABET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
)
_GREP_RULE = "-" * 35


class FileSystemError(Exception):
    """Raised when a virtual disk operation cannot be carried out."""


def encode_base64(data: bytes) -> str:
    """Standard Base64 with ``=`` padding."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode Base64, stopping at the first character outside the alphabet.

    Padding is not required; a dangling single character adds no byte.
    """
    length = 0
    for char in text:
        if char not in _BASE64_ALPHABET:
            break
        length += 1
    usable = text[:length]
    if len(usable) % 4 == 1:
        usable = usable[:-1]
    usable += "=" * (-len(usable) % 4)
    return base64.b64decode(usable)


class VirtualFileSystem:
    """Files under one root directory whose total size may not exceed a quota."""

    def __init__(self, root: str | Path, quota: int) -> None:
        self.root = Path(root)
        self.quota = quota
        self.root.mkdir(parents=True, exist_ok=True)
        self.used = self._calculate_size()
        self._log("SYSTEM", "FileSystem Initialized")

    def _log(self, action: str, details: str) -> None:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        try:
            with open(self.root / LOG_FILE, "a", encoding="utf-8") as handle:
                handle.write(f"[{stamp}] [{action}] {details}\n")
        except OSError:
            pass

    def _calculate_size(self) -> int:
        return sum(
            path.stat().st_size
            for path in self.root.rglob("*")
            if path.is_file() and path.name != LOG_FILE
        )

    def _path(self, name: str) -> Path:
        return self.root / name

    def create_file(self, name: str, content: str) -> str:
        """Write ``content`` to ``name``, creating parent directories."""
        data = content.encode("utf-8")
        if self.used + len(data) > self.quota:
            message = (
                f"Quota exceeded! Limit: {self.quota}, "
                f"Remaining: {self.quota - self.used}"
            )
            self._log("ERROR", message)
            raise FileSystemError(message)
        path = self._path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise FileSystemError(str(exc)) from exc
        self.used += len(data)
        self._log("CREATE", name)
        return f"Success: Created {name}"

    def delete_file(self, name: str) -> str:
        """Remove the regular file ``name``."""
        path = self._path(name)
        if not path.is_file():
            raise FileSystemError("File not found.")
        size = path.stat().st_size
        path.unlink()
        self.used -= size
        self._log("DELETE", name)
        return f"Success: Deleted {name}"

    def copy_file(self, src: str, dest: str) -> str:
        """Copy ``src`` to a new file ``dest`` within the quota."""
        src_path = self._path(src)
        dest_path = self._path(dest)
        if not src_path.exists():
            raise FileSystemError("Source not found.")
        if dest_path.exists():
            raise FileSystemError("Dest exists.")
        try:
            size = src_path.stat().st_size
            if self.used + size > self.quota:
                raise FileSystemError("Quota exceeded.")
            shutil.copyfile(src_path, dest_path)
        except OSError as exc:
            raise FileSystemError(str(exc)) from exc
        self.used += size
        self._log("COPY", f"{src} -> {dest}")
        return "Success: Copied."

    def move_file(self, src: str, dest: str) -> str:
        """Rename ``src`` to ``dest``."""
        src_path = self._path(src)
        if not src_path.exists():
            raise FileSystemError("Source not found.")
        try:
            os.replace(src_path, self._path(dest))
        except OSError as exc:
            raise FileSystemError(str(exc)) from exc
        self._log("MOVE", f"{src} -> {dest}")
        return "Success: Moved."

    def grep(self, keyword: str, file_name: str) -> list[tuple[int, str]]:
        """Return ``(line number, line)`` for each line containing ``keyword``."""
        path = self._path(file_name)
        if not path.exists():
            raise FileSystemError("File not found.")
        try:
            with open(path, encoding="utf-8", errors="replace") as handle:
                lines = [line.rstrip("\n") for line in handle]
        except OSError as exc:
            raise FileSystemError(str(exc)) from exc
        return [
            (number, line)
            for number, line in enumerate(lines, start=1)
            if keyword in line
        ]

    def encrypt_file(self, name: str) -> str:
        """Replace the file's content with a marked Base64 form of it."""
        path = self._path(name)
        if not path.exists():
            raise FileSystemError("File not found.")
        content = path.read_bytes()
        if content.startswith(ENCRYPTED_MARKER):
            raise FileSystemError("Already encrypted.")
        path.write_bytes(ENCRYPTED_MARKER + encode_base64(content).encode("ascii"))
        self._log("ENCRYPT", name)
        return "Success: Encrypted."

    def decrypt_file(self, name: str) -> str:
        """Restore a file written by :meth:`encrypt_file`."""
        path = self._path(name)
        if not path.exists():
            raise FileSystemError("File not found.")
        content = path.read_bytes()
        if not content.startswith(ENCRYPTED_MARKER):
            raise FileSystemError("Not encrypted.")
        encoded = content[len(ENCRYPTED_MARKER):].decode("latin-1")
        path.write_bytes(decode_base64(encoded))
        self._log("DECRYPT", name)
        return "Success: Decrypted."

    def _tree_lines(self, directory: Path, indent: str) -> list[str]:
        lines = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.name == LOG_FILE:
                continue
            if entry.is_dir():
                lines.append(f"{indent}|-- [{entry.name}]")
                lines.extend(self._tree_lines(entry, indent + "    "))
            else:
                lines.append(f"{indent}|-- {entry.name} ({entry.stat().st_size} B)")
        return lines

    def tree(self) -> str:
        """Return a drawing of the directory tree with file sizes."""
        lines = [f"Root: [{self.root.name}]"]
        if self.root.exists():
            lines.extend(self._tree_lines(self.root, ""))
        return "\n".join(lines)

    def status(self) -> str:
        """Return the quota use as ``Used: n / quota (p%)``."""
        percent = self.used / self.quota * 100.0 if self.quota > 0 else 0.0
        return f"Used: {self.used} / {self.quota} ({percent:.1f}%)"


class _TokenReader:
    """Whitespace-separated tokens read lazily from a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pending: deque[str] = deque()

    def next(self) -> str | None:
        while not self._pending:
            line = self._stream.readline()
            if not line:
                return None
            self._pending.extend(line.split())
        return self._pending.popleft()

    def take(self, count: int) -> list[str] | None:
        tokens = []
        for _ in range(count):
            token = self.next()
            if token is None:
                return None
            tokens.append(token)
        return tokens

    def discard_line(self) -> None:
        self._pending.clear()


_ARITY = {
    "create": 2,
    "del": 1,
    "cp": 2,
    "mv": 2,
    "grep": 2,
    "encrypt": 1,
    "decrypt": 1,
}


def _grep_report(vfs: VirtualFileSystem, keyword: str, file_name: str) -> str:
    matches = vfs.grep(keyword, file_name)
    lines = [f"--- Grep [{keyword}] in {file_name} ---"]
    lines.extend(f"{number}: {line}" for number, line in matches)
    if not matches:
        lines.append("(No matches)")
    lines.append(_GREP_RULE)
    return "\n".join(lines)


def run(
    input_stream: TextIO | None = None,
    out: TextIO | None = None,
    root: str | Path = DEFAULT_ROOT,
    quota: int = DEFAULT_QUOTA,
) -> int:
    """Execute disk commands read from ``input_stream`` until ``exit`` or end of input."""
    input_stream = input_stream if input_stream is not None else sys.stdin
    out = out if out is not None else sys.stdout
    vfs = VirtualFileSystem(root, quota)
    out.write("=== FileSystem Automation ===\n")
    out.write(
        "Ready. Commands: create, del, cp, mv, grep, encrypt, decrypt, "
        "tree, status, exit\n"
    )
    out.flush()

    actions = {
        "create": vfs.create_file,
        "del": vfs.delete_file,
        "cp": vfs.copy_file,
        "mv": vfs.move_file,
        "grep": lambda keyword, name: _grep_report(vfs, keyword, name),
        "encrypt": vfs.encrypt_file,
        "decrypt": vfs.decrypt_file,
    }

    tokens = _TokenReader(input_stream)
    while (command := tokens.next()) is not None:
        if command == "exit":
            break
        if command == "tree":
            out.write(vfs.tree() + "\n")
        elif command == "status":
            out.write(vfs.status() + "\n")
        elif command in actions:
            args = tokens.take(_ARITY[command])
            if args is None:
                break
            try:
                result = actions[command](*args)
            except FileSystemError as exc:
                result = f"Error: {exc}"
            out.write(result + "\n")
        else:
            out.write("Unknown command.\n")
            tokens.discard_line()
        out.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the virtual disk shell on stdin and stdout."""
    parser = argparse.ArgumentParser(description="Quota-limited virtual disk shell.")
    parser.add_argument("--root", default=str(DEFAULT_ROOT), help="disk directory")
    parser.add_argument("--quota", type=int, default=DEFAULT_QUOTA, help="bytes")
    args = parser.parse_args(argv)
    return run(sys.stdin, sys.stdout, args.root, args.quota)


if __name__ == "__main__":
    sys.exit(main())