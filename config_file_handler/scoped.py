"""Context managers that clean up after tests and examples."""

from __future__ import annotations

import shutil

from loguru import logger

from config_file_handler.errors import ConfigFileHandlerError
from config_file_handler.file_handler import cleanup
from config_file_handler.paths import user_app_dir


class ScopedUserAppDirRemover:
    """Remove the per-user application directory when the block exits.

    Tests and examples often create :func:`user_app_dir` as a side effect;
    this tries to remove it again however the block is left.

    Examples
    --------
    >>> with ScopedUserAppDirRemover():
    ...     handler = FileHandler.new_or_default("test.json", int)
    ...     handler.write(111)
    """

    def __enter__(self) -> "ScopedUserAppDirRemover":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.remove_dir()
        return False

    def remove_dir(self) -> None:
        try:
            directory = user_app_dir()
        except ConfigFileHandlerError as exc:
            logger.debug(f"No user app dir to remove: {exc}")
            return
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Failed to remove {directory}: {exc}")


class ScopedFileRemover:
    """Call :func:`cleanup` for ``name`` when the block exits."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __enter__(self) -> "ScopedFileRemover":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        cleanup(self.name)
        return False
