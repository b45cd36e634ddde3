"""Filesystem locations used by suiup and their initialisation."""

from __future__ import annotations

import json
import os
from pathlib import Path

RELEASES_ARCHIVES_FOLDER = "releases"

_WINDOWS = os.name == "nt"


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value is not None else None


def _required_env_path(name: str) -> Path:
    value = _env_path(name)
    if value is None:
        from suiup.types import SuiupError

        raise SuiupError(f"{name} not set")
    return value


def _local_app_data() -> Path:
    return _env_path("LOCALAPPDATA") or _required_env_path("USERPROFILE") / "AppData" / "Local"


def get_data_home() -> Path:
    """Base directory for user data."""
    if _WINDOWS:
        return _local_app_data()
    return _env_path("XDG_DATA_HOME") or _required_env_path("HOME") / ".local" / "share"


def get_config_home() -> Path:
    """Base directory for user configuration."""
    if _WINDOWS:
        return _local_app_data()
    return _env_path("XDG_CONFIG_HOME") or _required_env_path("HOME") / ".config"


def get_cache_home() -> Path:
    """Base directory for user caches."""
    if _WINDOWS:
        return (
            _env_path("TEMP")
            or _required_env_path("USERPROFILE") / "AppData" / "Local" / "Temp"
        )
    return _env_path("XDG_CACHE_HOME") or _required_env_path("HOME") / ".cache"


def get_suiup_data_dir() -> Path:
    return get_data_home() / "suiup"


def get_suiup_config_dir() -> Path:
    return get_config_home() / "suiup"


def get_suiup_cache_dir() -> Path:
    return get_cache_home() / "suiup"


def get_default_bin_dir() -> Path:
    """Directory where default binaries are placed."""
    if _WINDOWS:
        path = _required_env_path("LOCALAPPDATA") / "bin"
        path.mkdir(parents=True, exist_ok=True)
        return path
    return _env_path("SUIUP_DEFAULT_BIN_DIR") or _required_env_path("HOME") / ".local" / "bin"


def get_config_file(name: str) -> Path:
    return get_suiup_config_dir() / name


def default_file_path() -> Path:
    """Path of the default version file, created empty if missing."""
    path = get_config_file("default_version.json")
    if not path.exists():
        path.write_text(json.dumps({}, indent=2))
    return path


def installed_binaries_file() -> Path:
    """Path of the installed binaries file, created empty if missing."""
    path = get_config_file("installed_binaries.json")
    if not path.exists():
        from suiup.types import InstalledBinaries

        InstalledBinaries.create_file(path)
    return path


def release_archive_dir() -> Path:
    return get_suiup_cache_dir() / RELEASES_ARCHIVES_FOLDER


def binaries_dir() -> Path:
    """Directory holding all installed binaries."""
    return get_suiup_data_dir() / "binaries"


def initialize() -> None:
    """Create every directory and file suiup relies on."""
    for directory in (
        get_suiup_config_dir(),
        get_suiup_data_dir(),
        get_suiup_cache_dir(),
        binaries_dir(),
        release_archive_dir(),
        get_default_bin_dir(),
    ):
        directory.mkdir(parents=True, exist_ok=True)
    default_file_path()
    installed_binaries_file()


def handle_which() -> None:
    """Print the default binaries directory."""
    print(get_default_bin_dir())