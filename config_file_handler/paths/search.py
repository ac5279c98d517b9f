"""Ordered candidate directories for reading, creating and cleaning up.

Reading accepts any location where the file already exists, except the
last fallback (the system cache), which is used only when writable.
Creating considers only locations that pass a write probe, and never the
bundle resource directory, which ships read-only with the application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

from loguru import logger

from config_file_handler.errors import ConfigFileHandlerError
from config_file_handler.paths.common import additional_search_path
from config_file_handler.paths.platforms import (
    bundle_resource_dir,
    current_bin_dir,
    system_cache_dir,
    user_app_dir,
)
from config_file_handler.probe import is_dir_writable

Lookup = Callable[[], Path]

READ_ORDER: tuple[Lookup, ...] = (
    additional_search_path,
    current_bin_dir,
    bundle_resource_dir,
    user_app_dir,
    system_cache_dir,
)

WRITE_ORDER: tuple[Lookup, ...] = (
    additional_search_path,
    current_bin_dir,
    user_app_dir,
    system_cache_dir,
)


def _resolve(
    lookups: tuple[Lookup, ...],
) -> Iterator[tuple[Path | None, ConfigFileHandlerError | None]]:
    for lookup in lookups:
        try:
            yield lookup(), None
        except ConfigFileHandlerError as exc:
            logger.debug(f"Skipping candidate {lookup.__name__}: {exc}")
            yield None, exc


def read_search_dirs() -> Iterator[Path]:
    """Directories to look in for an existing file, highest priority first."""
    for lookup, (directory, _) in zip(READ_ORDER, _resolve(READ_ORDER)):
        if directory is None:
            continue
        if lookup is system_cache_dir and not is_dir_writable(directory):
            logger.debug(f"Skipping read-only system cache {directory}")
            continue
        yield directory


def write_search_dirs() -> Iterator[tuple[Path | None, ConfigFileHandlerError | None]]:
    """Directories in which a new file may be created, highest priority first.

    Yields ``(directory, None)`` for resolvable candidates and
    ``(None, error)`` for candidates whose lookup failed, so callers can
    report the last failure when every candidate is exhausted.
    """
    return _resolve(WRITE_ORDER)


def all_search_dirs() -> Iterator[Path]:
    """Every resolvable candidate directory, in read order."""
    for directory, _ in _resolve(READ_ORDER):
        if directory is not None:
            yield directory
