"""Locate, create and safely share one config or cache file per application."""

from config_file_handler.codec import Codec, JsonCodec
from config_file_handler.errors import (
    ConfigFileHandlerError,
    EnvironmentLookupError,
    FileIOError,
    NotFoundError,
    SerializationError,
)
from config_file_handler.file_handler import FileHandler, cleanup
from config_file_handler.paths import (
    additional_search_path,
    bundle_resource_dir,
    current_bin_dir,
    exe_file_stem,
    get_platform_dirs,
    set_additional_search_path,
    set_platform_dirs,
    system_cache_dir,
    user_app_dir,
)
from config_file_handler.scoped import ScopedFileRemover, ScopedUserAppDirRemover

__version__ = "0.1.0"

__all__ = [
    "FileHandler",
    "cleanup",
    # Serialization
    "Codec",
    "JsonCodec",
    # Errors
    "ConfigFileHandlerError",
    "EnvironmentLookupError",
    "FileIOError",
    "NotFoundError",
    "SerializationError",
    # Directories
    "additional_search_path",
    "bundle_resource_dir",
    "current_bin_dir",
    "exe_file_stem",
    "get_platform_dirs",
    "set_additional_search_path",
    "set_platform_dirs",
    "system_cache_dir",
    "user_app_dir",
    # Test helpers
    "ScopedFileRemover",
    "ScopedUserAppDirRemover",
]
