"""Candidate-directory resolution."""

from config_file_handler.paths.common import (
    SEARCH_PATH_ENV_VAR,
    additional_search_path,
    current_exe,
    exe_file_stem,
    reset_additional_search_path,
    set_additional_search_path,
)
from config_file_handler.paths.platforms import (
    MacBundleDirs,
    CandidateDirs,
    PlatformLibraryDirs,
    UnixDirs,
    WindowsDirs,
    bundle_resource_dir,
    current_bin_dir,
    get_platform_dirs,
    set_platform_dirs,
    system_cache_dir,
    user_app_dir,
)
from config_file_handler.paths.search import (
    all_search_dirs,
    read_search_dirs,
    write_search_dirs,
)

__all__ = [
    "SEARCH_PATH_ENV_VAR",
    "additional_search_path",
    "current_exe",
    "exe_file_stem",
    "reset_additional_search_path",
    "set_additional_search_path",
    # Platform families
    "MacBundleDirs",
    "CandidateDirs",
    "PlatformLibraryDirs",
    "UnixDirs",
    "WindowsDirs",
    "get_platform_dirs",
    "set_platform_dirs",
    "bundle_resource_dir",
    "current_bin_dir",
    "system_cache_dir",
    "user_app_dir",
    # Search orders
    "all_search_dirs",
    "read_search_dirs",
    "write_search_dirs",
]
