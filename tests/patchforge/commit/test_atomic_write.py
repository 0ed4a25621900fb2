import os
import stat

import pytest

from patchforge.commit import core
from patchforge.commit.core import atomic_write, encode_content, read_text
from patchforge.errors import BinaryContentError, InvalidRequestError, VALIDATION_ERROR


def leftovers(directory):
    return [p for p in os.listdir(directory) if p.startswith(core.TEMP_PREFIX)]


def test_creates_file_and_parents(tmp_path):
    dest = tmp_path / "a" / "b" / "new.txt"
    assert atomic_write(str(dest), b"hello") is True
    assert dest.read_bytes() == b"hello"
    assert leftovers(dest.parent) == []


def test_overwrite_reports_not_created(tmp_path):
    dest = tmp_path / "f.txt"
    dest.write_bytes(b"old")
    assert atomic_write(str(dest), b"new") is False
    assert dest.read_bytes() == b"new"


def test_existing_permissions_are_kept(tmp_path):
    dest = tmp_path / "script.sh"
    dest.write_bytes(b"#!/bin/sh\n")
    os.chmod(dest, 0o750)
    atomic_write(str(dest), b"#!/bin/sh\necho hi\n")
    assert stat.S_IMODE(os.stat(dest).st_mode) == 0o750


def test_new_file_mode_does_not_touch_process_umask(tmp_path, monkeypatch):
    def no_umask(mask):
        raise AssertionError("umask changed during write")

    monkeypatch.setattr(core.os, "umask", no_umask)
    dest = tmp_path / "fresh.txt"
    atomic_write(str(dest), b"x")
    monkeypatch.undo()
    assert stat.S_IMODE(os.stat(dest).st_mode) == 0o666 & ~core.UMASK


def test_failure_before_rename_leaves_target_untouched(tmp_path, monkeypatch):
    dest = tmp_path / "keep.txt"
    dest.write_bytes(b"original")

    def boom(src, dst):
        raise OSError("disk on fire")

    monkeypatch.setattr(core.os, "replace", boom)
    with pytest.raises(OSError, match="disk on fire"):
        atomic_write(str(dest), b"replacement")
    monkeypatch.undo()

    assert dest.read_bytes() == b"original"
    assert leftovers(tmp_path) == []


def test_read_text_keeps_line_endings(tmp_path):
    p = tmp_path / "crlf.txt"
    p.write_bytes(b"a\r\nb\r\n")
    assert read_text(str(p)) == "a\r\nb\r\n"


def test_read_text_refuses_invalid_utf8(tmp_path):
    p = tmp_path / "latin1.py"
    p.write_bytes(b"# caf\xe9 owner\nx = 1\n")
    with pytest.raises(BinaryContentError, match="not valid UTF-8") as exc:
        read_text(str(p))
    assert "0xe9 at offset 5" in exc.value.message
    assert exc.value.code == VALIDATION_ERROR


# ---------- encodings ----------


def test_encode_utf8():
    assert encode_content("é") == b"\xc3\xa9"


def test_encode_base64():
    assert encode_content("aGVsbG8=", "base64") == b"hello"


def test_encode_binary_maps_code_points_to_bytes():
    assert encode_content("\xff\x00A", "binary") == b"\xff\x00A"


@pytest.mark.parametrize(
    "content, encoding, message",
    [
        ("!!not base64!!", "base64", "Invalid base64 content"),
        ("日本", "binary", "Invalid binary content"),
        ("x", "utf16", "Invalid encoding"),
    ],
)
def test_encode_errors(content, encoding, message):
    with pytest.raises(InvalidRequestError, match=message):
        encode_content(content, encoding)
