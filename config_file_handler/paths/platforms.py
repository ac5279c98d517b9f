"""Candidate directories for each operating-system family.

Each family answers the same four questions: where the running program
lives, where an application bundle keeps its resources, where the current
user's application data goes, and where a system-wide cache for all users
goes. The user and system locations come from ``platformdirs``. Swap the
active family with :func:`set_platform_dirs`.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock

from platformdirs import site_cache_dir, user_config_dir

from config_file_handler.errors import EnvironmentLookupError, NotFoundError
from config_file_handler.paths.common import current_exe, exe_file_stem


class CandidateDirs(ABC):
    """Lookups shared by every family; subclasses provide user and system dirs."""

    name = "base"

    def current_bin_dir(self) -> Path:
        return current_exe().parent

    def bundle_resource_dir(self) -> Path:
        raise NotFoundError(f"No bundle resource directory on {self.name}")

    @abstractmethod
    def user_app_dir(self) -> Path: ...

    @abstractmethod
    def system_cache_dir(self) -> Path: ...


def _resolved(var_name: str, lookup, **kwargs) -> Path:
    """Run a platformdirs lookup; an unexpandable home becomes EnvironmentLookupError."""
    try:
        path = Path(lookup(exe_file_stem(), appauthor=False, **kwargs))
    except (OSError, KeyError) as exc:
        raise EnvironmentLookupError(var_name) from exc
    # expanduser leaves "~" in place when no home directory is known
    if not path.is_absolute() or path.parts[0].startswith("~"):
        raise EnvironmentLookupError(var_name)
    return path


class PlatformLibraryDirs(CandidateDirs):
    """User and system directories as ``platformdirs`` reports them."""

    user_var = "HOME"
    system_var = "HOME"

    def user_app_dir(self) -> Path:
        return _resolved(self.user_var, user_config_dir, roaming=True)

    def system_cache_dir(self) -> Path:
        return _resolved(self.system_var, site_cache_dir)


class WindowsDirs(PlatformLibraryDirs):
    name = "windows"
    user_var = "APPDATA"
    system_var = "ALLUSERSPROFILE"


class UnixDirs(PlatformLibraryDirs):
    name = "unix"


class MacBundleDirs(UnixDirs):
    """macOS, where the program may run from inside a ``.app`` bundle."""

    name = "macos"

    def bundle_resource_dir(self) -> Path:
        # <Name>.app/Contents/MacOS/<exe> -> <Name>.app/Contents/Resources
        bin_dir = self.current_bin_dir()
        contents = bin_dir.parent
        if (
            bin_dir.name == "MacOS"
            and contents.name == "Contents"
            and contents.parent.suffix == ".app"
        ):
            return contents / "Resources"
        raise NotFoundError(f"{bin_dir} is not inside an application bundle")


def default_platform_dirs() -> CandidateDirs:
    """Pick the family matching the running interpreter."""
    if sys.platform == "win32":
        return WindowsDirs()
    if sys.platform == "darwin":
        return MacBundleDirs()
    return UnixDirs()


_platform_dirs: CandidateDirs | None = None
_platform_lock = Lock()


def get_platform_dirs() -> CandidateDirs:
    global _platform_dirs
    with _platform_lock:
        if _platform_dirs is None:
            _platform_dirs = default_platform_dirs()
        return _platform_dirs


def set_platform_dirs(dirs: CandidateDirs | None) -> None:
    """Replace the active family; ``None`` restores the default."""
    global _platform_dirs
    with _platform_lock:
        _platform_dirs = dirs


def current_bin_dir() -> Path:
    """Directory containing the running program."""
    return get_platform_dirs().current_bin_dir()


def bundle_resource_dir() -> Path:
    """Resources directory of the enclosing application bundle, if any."""
    return get_platform_dirs().bundle_resource_dir()


def user_app_dir() -> Path:
    """Per-user application directory."""
    return get_platform_dirs().user_app_dir()


def system_cache_dir() -> Path:
    """System-wide cache directory shared by all users."""
    return get_platform_dirs().system_cache_dir()
