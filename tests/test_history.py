import hashlib
import logging

from patchforge.history import AccessHistory


def test_read_required_but_missing(history, tmp_path):
    check = history.validate(str(tmp_path / "f.txt"), requires_read=True)
    assert not check.is_valid
    assert "DIFF OPERATION WITHOUT READ" in check.warnings[0]
    assert check.suggestions


def test_read_not_required(history, tmp_path):
    check = history.validate(str(tmp_path / "f.txt"), requires_read=False)
    assert check.is_valid
    assert check.warnings == []


def test_fresh_read_is_valid(history, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_read(path, "abc")
    check = history.validate(path, requires_read=True)
    assert check.is_valid
    assert check.warnings == []


def test_stale_read_warns(history, clock, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_read(path)
    clock.advance(6 * 60)
    check = history.validate(path, requires_read=True)
    assert check.is_valid
    assert any("STALE READ" in w and "6 minutes" in w for w in check.warnings)


def test_write_after_read_in_same_tick_warns(history, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_read(path)
    history.record_write(path, True)
    check = history.validate(path, requires_read=True)
    assert check.is_valid
    assert any("FILE MODIFIED" in w for w in check.warnings)

    history.record_read(path)
    assert history.validate(path, requires_read=True).warnings == []


def test_repeated_failures(history, clock, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_write(path, False)
    history.record_write(path, False)
    assert history.validate(path, requires_read=False).warnings == []

    history.record_write(path, False)
    check = history.validate(path, requires_read=False)
    assert any("REPEATED FAILURES: 3" in w for w in check.warnings)

    clock.advance(11 * 60)
    assert history.validate(path, requires_read=False).warnings == []


def test_warnings_are_logged(history, clock, tmp_path, caplog):
    path = str(tmp_path / "f.txt")
    history.record_read(path)
    clock.advance(10 * 60)
    with caplog.at_level(logging.WARNING, logger="patchforge.history"):
        history.validate(path, requires_read=True)
    assert "STALE READ" in caplog.text


def test_content_hash_and_counts(history, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_read(path, "abc")
    history.record_read(path, "abc")
    info = history.file_info(path)
    assert info.read_count == 2
    assert info.content_hash == hashlib.sha256(b"abc").hexdigest()

    history.record_write(path, True)
    info = history.file_info(path)
    assert info.write_count == 1
    assert info.content_hash is None


def test_failed_write_does_not_count_as_write(history, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_write(path, False)
    assert history.file_info(path) is None
    assert history.recent_history(1)[0].success is False


def test_paths_are_normalized(history, tmp_path):
    history.record_read(str(tmp_path / "sub" / ".." / "f.txt"))
    assert history.file_info(str(tmp_path / "f.txt")) is not None


def test_tool_history_is_bounded(clock):
    history = AccessHistory(clock=clock, max_history=3)
    for name in ["a", "b", "c", "d", "e"]:
        history.record_tool_call(name, True)
    assert [c.name for c in history.recent_history(10)] == ["c", "d", "e"]
    assert [c.name for c in history.recent_history(2)] == ["d", "e"]


def test_cleanup_forgets_old_activity(history, clock, tmp_path):
    old = str(tmp_path / "old.txt")
    new = str(tmp_path / "new.txt")
    history.record_read(old)
    clock.advance(25 * 60 * 60)
    history.record_read(new)
    history.cleanup()
    assert history.file_info(old) is None
    assert history.file_info(new) is not None
    assert [c.path for c in history.recent_history(10)] == [new.replace("\\", "/")]


def test_reset(history, tmp_path):
    path = str(tmp_path / "f.txt")
    history.record_read(path)
    history.reset()
    assert history.file_info(path) is None
    assert history.recent_history() == []
