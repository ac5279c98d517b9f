"""Typed, lock-protected access to one named config or cache file."""

from __future__ import annotations

import errno
import os
import uuid
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from loguru import logger

from config_file_handler.codec import Codec, JsonCodec
from config_file_handler.errors import ConfigFileHandlerError, FileIOError, NotFoundError
from config_file_handler.global_mutex import get_mutex
from config_file_handler.locking import read_with_shared_lock, write_with_exclusive_lock
from config_file_handler.paths import all_search_dirs, read_search_dirs, write_search_dirs
from config_file_handler.probe import is_dir_writable

T = TypeVar("T")

_NO_HARD_LINKS = {errno.EPERM, errno.EOPNOTSUPP, getattr(errno, "ENOTSUP", errno.EOPNOTSUPP)}


def _can_open(path: Path, writable: bool) -> bool:
    try:
        fd = os.open(path, os.O_RDWR if writable else os.O_RDONLY)
    except OSError:
        return False
    os.close(fd)
    return path.is_file()


class FileHandler(Generic[T]):
    """Read and write a JSON file holding a value of one type.

    A handle only remembers where the file is. Each :meth:`read` and
    :meth:`write` opens, locks, does its work, unlocks and closes the file,
    so handles are cheap and safe to create per operation.

    Thread- and process-safety
    --------------------------
    The same file may be read and written concurrently from several threads
    and processes through ``FileHandler``. Reads take a shared advisory
    lock, writes an exclusive one; a reader always sees one complete write.

    Examples
    --------
    >>> handler = FileHandler.new_or_default("settings.json", int)
    >>> handler.read()
    0
    >>> handler.write(42)
    >>> handler.read()
    42
    """

    def __init__(self, path: Path, value_type: Any, codec: Codec[T] | None = None) -> None:
        self._path = Path(path)
        self._value_type = value_type
        self._codec: Codec[T] = codec if codec is not None else JsonCodec(value_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r})"

    @property
    def path(self) -> Path:
        """Absolute path of the file."""
        return self._path

    @property
    def value_type(self) -> Any:
        return self._value_type

    @classmethod
    def open(
        cls,
        name: str,
        value_type: Any,
        require_writable: bool = False,
        codec: Codec[T] | None = None,
    ) -> "FileHandler[T]":
        """Find an existing file called ``name``.

        Candidate directories are tried in this order, and the first one
        holding a file that can be opened with the requested access wins:

        1. the additional search path, if set
        2. the directory of the running program
        3. the application bundle's resource directory (macOS bundles only)
        4. the per-user application directory
        5. the system-wide cache directory, if writable

        Parameters
        ----------
        name : str
            File name, not a path.
        value_type : Any
            Type of the stored value.
        require_writable : bool, default=False
            Only accept files this process may also write.
        codec : Codec, optional
            Encoder/decoder; JSON via pydantic by default.

        Raises
        ------
        NotFoundError
            No candidate directory holds an accessible file of that name.
        """
        for directory in read_search_dirs():
            path = directory / name
            if _can_open(path, require_writable):
                logger.debug(f"Found {name} at {path}")
                return cls(path, value_type, codec)
        mode = "writable" if require_writable else "readable"
        raise NotFoundError(f"No {mode} file named {name} in any search directory")

    @classmethod
    def new_or_default(
        cls,
        name: str,
        value_type: Any,
        require_writable_if_exists: bool = False,
        default_factory: Callable[[], T] | None = None,
        codec: Codec[T] | None = None,
    ) -> "FileHandler[T]":
        """Open ``name``, creating it with a default value if it does not exist.

        An existing file is located as in :meth:`open`. Otherwise the default
        (``default_factory()``, or ``value_type()`` when no factory is given)
        is written to the first writable directory among the additional
        search path, the program directory, the per-user application
        directory and the system-wide cache directory. Missing directories
        are created.

        Raises
        ------
        NotFoundError
            No candidate directory could be resolved.
        ConfigFileHandlerError
            The error from the last candidate when every candidate failed.
        """
        try:
            return cls.open(name, value_type, require_writable_if_exists, codec)
        except ConfigFileHandlerError as exc:
            logger.debug(f"{name} not found, creating it: {exc}")

        codec = codec if codec is not None else JsonCodec(value_type)
        default = default_factory() if default_factory is not None else value_type()
        contents = codec.encode(default)

        last_error: ConfigFileHandlerError | None = None
        with get_mutex():
            # Another thread may have created it while we waited.
            try:
                return cls.open(name, value_type, require_writable_if_exists, codec)
            except ConfigFileHandlerError:
                pass

            for directory, lookup_error in write_search_dirs():
                if directory is None:
                    last_error = lookup_error
                    continue
                try:
                    path = _create_file(directory, name, contents, require_writable_if_exists)
                except ConfigFileHandlerError as exc:
                    logger.debug(f"Cannot create {name} in {directory}: {exc}")
                    last_error = exc
                    continue
                logger.info(f"Created {path} with default contents")
                return cls(path, value_type, codec)

        if last_error is None:
            last_error = NotFoundError(f"No search directory available for {name}")
        raise last_error

    def read(self) -> T:
        """Read and decode the file.

        Raises
        ------
        FileIOError
            The file is gone or cannot be read.
        SerializationError
            The contents are not a valid encoding of the value type.
        """
        return read_with_shared_lock(self._path, self._codec.decode)

    def write(self, value: T) -> None:
        """Replace the file's contents with ``value``."""
        contents = self._codec.encode(value)
        write_with_exclusive_lock(self._path, contents)


def _create_file(directory: Path, name: str, contents: bytes, require_writable: bool) -> Path:
    """Create ``directory/name`` holding ``contents``.

    The contents go to a hidden temporary file first, which is then linked
    into place, so ``name`` never exists with partial contents and nothing
    is left behind on failure. If another process published the file
    first, its copy is used as long as it has the requested access.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileIOError.wrap("create directory", directory, exc) from exc
    if not is_dir_writable(directory):
        raise FileIOError(f"Directory {directory} is not writable", path=directory)

    path = directory / name
    tmp = directory / f".{name}.{uuid.uuid4().hex}.tmp"
    try:
        _write_new(tmp, contents)
        _publish(tmp, path)
    except FileExistsError:
        if _can_open(path, require_writable):
            logger.debug(f"{path} appeared while creating it, using it")
            return path
        raise FileIOError(f"{path} already exists and cannot be used", path=path)
    except OSError as exc:
        raise FileIOError.wrap("create", path, exc) from exc
    finally:
        try:
            tmp.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(f"Could not remove temporary file {tmp}: {exc}")
    return path


def _write_new(tmp: Path, contents: bytes) -> None:
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0), 0o666)
    with os.fdopen(fd, "wb") as f:
        f.write(contents)
        f.flush()
        os.fsync(f.fileno())


def _publish(tmp: Path, path: Path) -> None:
    """Give ``tmp`` the name ``path``; FileExistsError if the name is taken."""
    try:
        os.link(tmp, path)
    except OSError as exc:
        if exc.errno not in _NO_HARD_LINKS:
            raise
        # no hard links on this filesystem
        if path.exists():
            raise FileExistsError(errno.EEXIST, "File exists", str(path)) from exc
        os.replace(tmp, path)


def cleanup(name: str) -> None:
    """Remove ``name`` from every search directory that holds it.

    Stops at the first removal that fails and raises it; later locations
    are left untouched.
    """
    for directory in all_search_dirs():
        path = directory / name
        if not path.exists():
            continue
        try:
            path.unlink()
        except OSError as exc:
            raise FileIOError.wrap("remove", path, exc) from exc
        logger.info(f"Removed {path}")
