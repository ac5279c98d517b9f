"""Shared pytest fixtures for config-file-handler tests."""

from pathlib import Path

import pytest

from config_file_handler.errors import NotFoundError
from config_file_handler.paths import (
    CandidateDirs,
    reset_additional_search_path,
    set_additional_search_path,
    set_platform_dirs,
)
from config_file_handler.paths.common import SEARCH_PATH_ENV_VAR


class FakeDirs(CandidateDirs):
    """Platform family whose candidate directories all live under one root.

    Each location can be pointed below a regular file with :meth:`block`,
    which makes it impossible to create, even for root.
    """

    name = "fake"

    def __init__(self, root: Path) -> None:
        self.root = root
        self.bin_dir = root / "bin"
        self.bundle_dir: Path | None = None
        self.user_dir = root / "home" / ".config" / "app"
        self.system_dir = root / "var" / "cache" / "app"

    def current_bin_dir(self) -> Path:
        return self.bin_dir

    def bundle_resource_dir(self) -> Path:
        if self.bundle_dir is None:
            raise NotFoundError("No bundle in tests")
        return self.bundle_dir

    def user_app_dir(self) -> Path:
        return self.user_dir

    def system_cache_dir(self) -> Path:
        return self.system_dir

    def block(self, attr: str) -> Path:
        """Redirect ``attr`` (e.g. ``"bin_dir"``) below a regular file."""
        blocker = self.root / f"blocked-{attr}"
        blocker.write_text("not a directory", encoding="utf-8")
        blocked = blocker / "sub"
        setattr(self, attr, blocked)
        return blocked


@pytest.fixture(autouse=True)
def fake_dirs(tmp_path, monkeypatch):
    """Redirect every candidate directory into a temp directory for every test."""
    monkeypatch.delenv(SEARCH_PATH_ENV_VAR, raising=False)
    reset_additional_search_path()
    dirs = FakeDirs(tmp_path / "fs")
    (tmp_path / "fs").mkdir()
    set_platform_dirs(dirs)
    yield dirs
    set_platform_dirs(None)
    reset_additional_search_path()


@pytest.fixture
def extra_dir(tmp_path):
    """An additional search path, set for the duration of the test."""
    directory = tmp_path / "extra"
    directory.mkdir()
    set_additional_search_path(directory)
    return directory
