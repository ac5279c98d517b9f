"""Empirical write-access check for directories.

Permission bits do not tell the whole story (read-only mounts, mandatory
access control, container volumes), so the only reliable answer is to try.
The result is a best-effort snapshot: access can change between the probe
and the real write.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from loguru import logger

from config_file_handler.global_mutex import get_mutex

PROBE_PREFIX = ".cfh-probe-"


def is_dir_writable(directory: Path) -> bool:
    """Return True if a file can be created in and removed from ``directory``."""
    probe = Path(directory) / f"{PROBE_PREFIX}{uuid.uuid4().hex}.tmp"
    with get_mutex():
        try:
            fd = os.open(probe, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except OSError as exc:
            logger.debug(f"{directory} is not writable: {exc}")
            return False
        os.close(fd)

        try:
            probe.unlink()
        except OSError as exc:
            logger.warning(f"Could not remove write probe {probe}: {exc}")
            return False
    return True
