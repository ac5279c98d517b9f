"""Exception types raised by config-file-handler."""

from __future__ import annotations

from pathlib import Path


class ConfigFileHandlerError(Exception):
    """Base class for every error raised by this package."""


class EnvironmentLookupError(ConfigFileHandlerError):
    """A required environment variable is missing or empty."""

    def __init__(self, var_name: str) -> None:
        super().__init__(f"Environment variable {var_name} is not set")
        self.var_name = var_name


class FileIOError(ConfigFileHandlerError):
    """An OS-level create/open/read/write/lock/unlock/remove failure.

    The original ``OSError`` is available as ``os_error`` and as
    ``__cause__``.
    """

    def __init__(self, message: str, path: Path | None = None, os_error: OSError | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.os_error = os_error

    @classmethod
    def wrap(cls, action: str, path: Path, exc: OSError) -> "FileIOError":
        return cls(f"Failed to {action} {path}: {exc}", path=path, os_error=exc)


class SerializationError(ConfigFileHandlerError):
    """File contents do not decode as the expected type, or a value cannot be encoded."""


class NotFoundError(ConfigFileHandlerError):
    """No candidate location satisfied a lookup."""
