"""Advisory-locked reads and writes of a single file.

Readers take a shared lock, writers an exclusive one. The locks only
coordinate participants that also lock; they do not stop other writers.

On Windows the locks come from ``msvcrt.locking`` on the first byte, which
differs from ``flock`` in two ways:

* there is no true shared lock. ``LK_RLCK`` is exclusive like ``LK_LOCK``,
  so concurrent readers are serialized rather than run side by side.
* a blocked lock is not held indefinitely. ``msvcrt`` retries once per
  second and gives up after about 10 seconds with an ``OSError``, which
  surfaces here as :class:`~config_file_handler.errors.FileIOError`.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Callable, ContextManager, Iterator, TypeVar

from loguru import logger

from config_file_handler.errors import FileIOError

T = TypeVar("T")

if sys.platform == "win32":
    import msvcrt

    # msvcrt locks a byte range starting at the current position, so the
    # lock is always taken and released on the first byte.

    def _lock_shared(f: IO[bytes]) -> None:
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_RLCK, 1)

    def _lock_exclusive(f: IO[bytes]) -> None:
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)

    def _unlock(f: IO[bytes]) -> None:
        f.seek(0)
        msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _lock_shared(f: IO[bytes]) -> None:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)

    def _lock_exclusive(f: IO[bytes]) -> None:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)

    def _unlock(f: IO[bytes]) -> None:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


@contextmanager
def _locked(f: IO[bytes], path: Path, lock: Callable[[IO[bytes]], None], kind: str) -> Iterator[None]:
    try:
        lock(f)
    except OSError as exc:
        raise FileIOError.wrap(f"take {kind} lock on", path, exc) from exc

    failed = True
    try:
        yield
        failed = False
    finally:
        try:
            _unlock(f)
        except OSError as exc:
            if not failed:
                raise FileIOError.wrap("unlock", path, exc) from exc
            # The operation's own error is already propagating.
            logger.warning(f"Failed to unlock {path} after an error: {exc}")


def shared_lock(f: IO[bytes], path: Path) -> ContextManager[None]:
    """Hold a shared advisory lock on ``f`` for the duration of the block."""
    return _locked(f, path, _lock_shared, "shared")


def exclusive_lock(f: IO[bytes], path: Path) -> ContextManager[None]:
    """Hold an exclusive advisory lock on ``f`` for the duration of the block."""
    return _locked(f, path, _lock_exclusive, "exclusive")


def read_with_shared_lock(path: Path, decode: Callable[[bytes], T]) -> T:
    """Read and decode ``path`` while holding a shared lock.

    Parameters
    ----------
    path : Path
        File to read.
    decode : Callable[[bytes], T]
        Turns the raw file contents into a value. Runs inside the lock;
        whatever it raises is propagated after the lock is released.

    Returns
    -------
    T
        The decoded value.

    Raises
    ------
    FileIOError
        The file could not be opened, locked, read or unlocked.
    """
    try:
        f = open(path, "rb")
    except OSError as exc:
        raise FileIOError.wrap("open for reading", path, exc) from exc

    with f:
        with shared_lock(f, path):
            try:
                data = f.read()
            except OSError as exc:
                raise FileIOError.wrap("read", path, exc) from exc
            return decode(data)


def write_with_exclusive_lock(path: Path, data: bytes) -> None:
    """Replace the contents of ``path`` with ``data`` under an exclusive lock.

    The file is created if missing. Truncation happens only once the lock
    is held, so a concurrent writer that already owns the lock never sees
    its output cut short.

    Raises
    ------
    FileIOError
        The file could not be opened, locked, written or unlocked.
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0), 0o666)
        f = os.fdopen(fd, "wb")
    except OSError as exc:
        raise FileIOError.wrap("open for writing", path, exc) from exc

    with f:
        with exclusive_lock(f, path):
            try:
                f.seek(0)
                f.truncate()
                f.write(data)
                f.flush()
            except OSError as exc:
                raise FileIOError.wrap("write", path, exc) from exc
