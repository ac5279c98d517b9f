"""Process-wide mutex for the create-if-missing and writability-probe paths.

Advisory file locks coordinate processes, but they do not close the gap
between "the file does not exist" and "create it" for threads inside one
process. Those sequences run under this mutex.
"""

from __future__ import annotations

from threading import Lock, RLock

_MUTEX: RLock | None = None
_MUTEX_GUARD = Lock()


def get_mutex() -> RLock:
    """Return the process-wide mutex, creating it on first use.

    The mutex is re-entrant: the create-if-missing path probes directories
    while already holding it.
    """
    global _MUTEX
    if _MUTEX is None:
        with _MUTEX_GUARD:
            if _MUTEX is None:
                _MUTEX = RLock()
    return _MUTEX
