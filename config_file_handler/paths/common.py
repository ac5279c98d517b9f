"""Executable location and the process-wide additional search path."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from threading import Lock

from config_file_handler.errors import NotFoundError

SEARCH_PATH_ENV_VAR = "CONFIG_FILE_HANDLER_SEARCH_PATH"

_UNSET = object()
_additional_search_path: object = _UNSET
_search_path_lock = Lock()


def current_exe() -> Path:
    """Return the absolute path of the running program.

    In a frozen (PyInstaller) build this is the bundled executable; otherwise
    it is the main script the interpreter was started with.
    """
    if getattr(sys, "frozen", False):
        candidate = sys.executable
    else:
        candidate = sys.argv[0] if sys.argv else ""
    if not candidate or candidate == "-c":
        raise NotFoundError("Path of the current executable could not be determined")
    return Path(candidate).resolve()


def exe_file_stem() -> str:
    """File name of the running program without its extension.

    For ``C:\\Abc.exe`` this is ``"Abc"``. A package started with
    ``python -m pkg`` runs ``pkg/__main__.py`` and is named ``"pkg"``.
    """
    exe = current_exe()
    if not exe.stem:
        raise NotFoundError(f"No file name component: {exe}")
    if exe.stem == "__main__":
        return _main_package_name(exe)
    return exe.stem


def _main_package_name(exe: Path) -> str:
    spec = getattr(sys.modules.get("__main__"), "__spec__", None)
    if spec is not None and spec.parent:
        return spec.parent
    # run as a plain script: fall back to the enclosing directory
    if not exe.parent.name:
        raise NotFoundError(f"No package name for {exe}")
    return exe.parent.name


def set_additional_search_path(path: str | os.PathLike | None) -> None:
    """Set a directory that is searched before every other candidate.

    Passing ``None`` clears the override, including any value taken from
    the ``CONFIG_FILE_HANDLER_SEARCH_PATH`` environment variable.
    """
    global _additional_search_path
    with _search_path_lock:
        _additional_search_path = None if path is None else Path(path).absolute()


def additional_search_path() -> Path:
    """Return the additional search path, or raise NotFoundError when unset."""
    global _additional_search_path
    with _search_path_lock:
        if _additional_search_path is _UNSET:
            value = os.environ.get(SEARCH_PATH_ENV_VAR)
            _additional_search_path = Path(value).absolute() if value else None
        path = _additional_search_path
    if path is None:
        raise NotFoundError("No additional search path set")
    return path


def reset_additional_search_path() -> None:
    """Forget any override so the environment variable is consulted again."""
    global _additional_search_path
    with _search_path_lock:
        _additional_search_path = _UNSET
