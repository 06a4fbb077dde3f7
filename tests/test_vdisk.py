import io

import pytest

from workbench.vdisk import (
    LOG_FILE,
    FileSystemError,
    VirtualFileSystem,
    decode_base64,
    encode_base64,
    run,
)


@pytest.fixture
def vfs(tmp_path):
    return VirtualFileSystem(tmp_path / "disk", 100)


def test_base64_known_value():
    assert encode_base64(b"Man") == "TWFu"


@pytest.mark.parametrize("data", [b"", b"a", b"ab", b"abc", bytes(range(256))])
def test_base64_round_trip(data):
    assert decode_base64(encode_base64(data)) == data


def test_decode_stops_at_invalid_character():
    assert decode_base64(encode_base64(b"Man") + "!!junk") == b"Man"


def test_decode_without_padding():
    assert decode_base64(encode_base64(b"ab").rstrip("=")) == b"ab"


def test_init_creates_root_and_log_not_counted(tmp_path):
    disk = VirtualFileSystem(tmp_path / "new", 50)
    assert (tmp_path / "new" / LOG_FILE).exists()
    assert disk.used == 0


def test_init_counts_existing_files(tmp_path):
    root = tmp_path / "disk"
    (root / "sub").mkdir(parents=True)
    (root / "sub" / "x.txt").write_bytes(b"12345")
    assert VirtualFileSystem(root, 100).used == 5


def test_create_updates_usage(vfs):
    assert vfs.create_file("dir/a.txt", "hello") == "Success: Created dir/a.txt"
    assert (vfs.root / "dir" / "a.txt").read_text() == "hello"
    assert vfs.used == len("hello")
    assert vfs.status().startswith(f"Used: {len('hello')} / 100 (")


def test_create_over_quota(vfs):
    with pytest.raises(FileSystemError, match="Quota exceeded"):
        vfs.create_file("big.txt", "x" * 101)
    assert not (vfs.root / "big.txt").exists()
    assert vfs.used == 0


def test_delete(vfs):
    vfs.create_file("a.txt", "abc")
    assert vfs.delete_file("a.txt") == "Success: Deleted a.txt"
    assert vfs.used == 0
    with pytest.raises(FileSystemError, match="File not found"):
        vfs.delete_file("a.txt")


def test_copy(vfs):
    vfs.create_file("a.txt", "abc")
    assert vfs.copy_file("a.txt", "b.txt") == "Success: Copied."
    assert (vfs.root / "b.txt").read_text() == "abc"
    assert vfs.used == 2 * len("abc")


def test_copy_errors(vfs):
    with pytest.raises(FileSystemError, match="Source not found"):
        vfs.copy_file("none.txt", "b.txt")
    vfs.create_file("a.txt", "abc")
    vfs.create_file("b.txt", "d")
    with pytest.raises(FileSystemError, match="Dest exists"):
        vfs.copy_file("a.txt", "b.txt")
    vfs.create_file("big.txt", "y" * 60)
    with pytest.raises(FileSystemError, match="Quota exceeded"):
        vfs.copy_file("big.txt", "c.txt")


def test_move(vfs):
    vfs.create_file("a.txt", "abc")
    assert vfs.move_file("a.txt", "b.txt") == "Success: Moved."
    assert not (vfs.root / "a.txt").exists()
    assert (vfs.root / "b.txt").read_text() == "abc"
    with pytest.raises(FileSystemError, match="Source not found"):
        vfs.move_file("a.txt", "c.txt")


def test_grep(vfs):
    vfs.create_file("g.txt", "hello world\nnothing\nworld again\n")
    assert vfs.grep("world", "g.txt") == [(1, "hello world"), (3, "world again")]
    assert vfs.grep("absent", "g.txt") == []
    with pytest.raises(FileSystemError):
        vfs.grep("x", "missing.txt")


def test_encrypt_decrypt_round_trip(vfs):
    vfs.create_file("s.txt", "secret text")
    assert vfs.encrypt_file("s.txt") == "Success: Encrypted."
    assert (vfs.root / "s.txt").read_bytes().startswith(b"[ENCRYPTED]")
    with pytest.raises(FileSystemError, match="Already encrypted"):
        vfs.encrypt_file("s.txt")
    assert vfs.decrypt_file("s.txt") == "Success: Decrypted."
    assert (vfs.root / "s.txt").read_text() == "secret text"
    with pytest.raises(FileSystemError, match="Not encrypted"):
        vfs.decrypt_file("s.txt")


def test_tree(vfs):
    vfs.create_file("sub/a.txt", "abc")
    lines = vfs.tree().splitlines()
    assert lines[0] == f"Root: [{vfs.root.name}]"
    assert "|-- [sub]" in lines
    assert "    |-- a.txt (3 B)" in lines
    assert all(LOG_FILE not in line for line in lines)


def test_run_session(tmp_path):
    commands = "create a.txt hi\nstatus\nbogus x y\ndel a.txt\ndel a.txt\nexit\ncreate z.txt no\n"
    out = io.StringIO()
    assert run(io.StringIO(commands), out, tmp_path / "disk", 100) == 0
    text = out.getvalue()
    assert "Success: Created a.txt" in text
    assert "Used: 2 / 100" in text
    assert "Unknown command." in text
    assert "Success: Deleted a.txt" in text
    assert "Error: File not found." in text
    assert not (tmp_path / "disk" / "z.txt").exists()