"""Tests for advisory-locked file reads and writes."""

import sys

import pytest

from config_file_handler.errors import FileIOError, SerializationError
from config_file_handler.locking import (
    exclusive_lock,
    read_with_shared_lock,
    shared_lock,
    write_with_exclusive_lock,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses fcntl directly")


def _is_unlocked(path) -> bool:
    """True if another open file can take an exclusive lock without waiting."""
    import fcntl

    with open(path, "rb") as other:
        try:
            fcntl.flock(other.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        fcntl.flock(other.fileno(), fcntl.LOCK_UN)
        return True


@pytest.fixture
def target(tmp_path):
    return tmp_path / "data.json"


# ── write_with_exclusive_lock ────────────────────────────────────────


class TestWrite:
    def test_creates_file(self, target):
        write_with_exclusive_lock(target, b"[1, 2]")
        assert target.read_bytes() == b"[1, 2]"

    def test_truncates_longer_contents(self, target):
        target.write_bytes(b"0123456789")
        write_with_exclusive_lock(target, b"ab")
        assert target.read_bytes() == b"ab"

    def test_empty_payload(self, target):
        target.write_bytes(b"old")
        write_with_exclusive_lock(target, b"")
        assert target.read_bytes() == b""

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileIOError) as excinfo:
            write_with_exclusive_lock(tmp_path / "missing" / "x.json", b"1")
        assert isinstance(excinfo.value.os_error, FileNotFoundError)

    def test_directory_target_raises(self, tmp_path):
        with pytest.raises(FileIOError):
            write_with_exclusive_lock(tmp_path, b"1")

    @posix_only
    def test_lock_released_after_write(self, target):
        write_with_exclusive_lock(target, b"1")
        assert _is_unlocked(target)


# ── read_with_shared_lock ────────────────────────────────────────────


class TestRead:
    def test_returns_decoded_value(self, target):
        target.write_bytes(b"12")
        assert read_with_shared_lock(target, lambda data: int(data)) == 12

    def test_decoder_receives_bytes(self, target):
        target.write_bytes(b"abc")
        assert read_with_shared_lock(target, lambda data: data) == b"abc"

    def test_missing_file_raises(self, target):
        with pytest.raises(FileIOError) as excinfo:
            read_with_shared_lock(target, lambda data: data)
        assert excinfo.value.path == target
        assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    def test_decode_error_propagates(self, target):
        target.write_bytes(b"x")

        def _decode(data):
            raise SerializationError("bad")

        with pytest.raises(SerializationError):
            read_with_shared_lock(target, _decode)

    @posix_only
    def test_lock_released_after_decode_error(self, target):
        target.write_bytes(b"x")

        def _decode(data):
            raise SerializationError("bad")

        with pytest.raises(SerializationError):
            read_with_shared_lock(target, _decode)
        assert _is_unlocked(target)


# ── lock context managers ────────────────────────────────────────────


@posix_only
class TestLockContextManagers:
    def test_exclusive_lock_blocks_others(self, target):
        target.write_bytes(b"")
        with open(target, "rb") as f:
            with exclusive_lock(f, target):
                assert not _is_unlocked(target)
            assert _is_unlocked(target)

    def test_shared_locks_coexist(self, target):
        import fcntl

        target.write_bytes(b"")
        with open(target, "rb") as f, open(target, "rb") as g:
            with shared_lock(f, target):
                fcntl.flock(g.fileno(), fcntl.LOCK_SH | fcntl.LOCK_NB)
                fcntl.flock(g.fileno(), fcntl.LOCK_UN)

    def test_released_when_block_raises(self, target):
        target.write_bytes(b"")
        with open(target, "rb") as f:
            with pytest.raises(RuntimeError):
                with exclusive_lock(f, target):
                    raise RuntimeError("boom")
        assert _is_unlocked(target)

    def test_unlock_failure_raises(self, target, monkeypatch):
        def _fail(f):
            raise OSError("unlock failed")

        target.write_bytes(b"")
        with open(target, "rb") as f:
            monkeypatch.setattr("config_file_handler.locking._unlock", _fail)
            with pytest.raises(FileIOError, match="unlock"):
                with exclusive_lock(f, target):
                    pass

    def test_unlock_failure_does_not_mask_original_error(self, target, monkeypatch):
        def _fail(f):
            raise OSError("unlock failed")

        target.write_bytes(b"")
        with open(target, "rb") as f:
            monkeypatch.setattr("config_file_handler.locking._unlock", _fail)
            with pytest.raises(RuntimeError, match="boom"):
                with exclusive_lock(f, target):
                    raise RuntimeError("boom")
