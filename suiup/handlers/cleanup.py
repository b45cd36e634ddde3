"""The ``cleanup`` command: prune cached release archives."""

from __future__ import annotations

import math
import shutil
import time
from pathlib import Path

from suiup.paths import release_archive_dir
from suiup.types import SuiupError

_SECONDS_PER_DAY = 60 * 60 * 24
_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def handle_cleanup(all_: bool, days: int, dry_run: bool) -> None:
    """Remove cached archives, either all or those older than ``days``."""
    archive_dir = release_archive_dir()
    print(f"Release archives directory: {archive_dir}")

    if not archive_dir.exists():
        print("Release archives directory does not exist, nothing to clean up.")
        return

    print(f"Current cache size: {format_file_size(calculate_dir_size(archive_dir))}")

    if all_:
        if dry_run:
            print("Would remove all release archives in cache directory (dry run)")
        else:
            print("Removing all release archives in cache directory...")
            shutil.rmtree(archive_dir)
            archive_dir.mkdir(parents=True, exist_ok=True)
            print("Cache cleared successfully.")
        return

    cutoff = days * _SECONDS_PER_DAY
    cleaned_size = 0
    files_removed = 0

    print(f"Removing release archives older than {days} days...")

    for path in archive_dir.iterdir():
        if not path.is_file():
            continue
        stat = path.stat()
        age = time.time() - stat.st_mtime
        if age < 0:
            raise SuiupError(f"Modification time of {path} is in the future")
        if age <= cutoff:
            continue

        days_old = int(age // _SECONDS_PER_DAY)
        cleaned_size += stat.st_size
        files_removed += 1
        details = f"{path} ({days_old} days old, {format_file_size(stat.st_size)})"
        if dry_run:
            print(f"Would remove: {details}")
        else:
            print(f"Removing: {details}")
            path.unlink()

    if dry_run:
        print(
            f"Would remove {files_removed} files totaling "
            f"{format_file_size(cleaned_size)} (dry run)"
        )
    else:
        print(
            f"Cleanup complete. {files_removed} files removed, "
            f"{format_file_size(cleaned_size)} freed"
        )
        print(f"New cache size: {format_file_size(calculate_dir_size(archive_dir))}")


def calculate_dir_size(directory: Path) -> int:
    """Total size in bytes of all files below ``directory``."""
    directory = Path(directory)
    if not directory.exists():
        return 0
    total = 0
    for path in directory.iterdir():
        if path.is_file():
            total += path.stat().st_size
        elif path.is_dir():
            total += calculate_dir_size(path)
    return total


def format_file_size(size: int) -> str:
    """Format a byte count in a human readable form."""
    if size == 0:
        return "0 B"
    exponent = math.floor(math.log(size, 1024))
    value = size / 1024**exponent
    unit = _UNITS[min(exponent, len(_UNITS) - 1)]
    if value < 10.0:
        return f"{value:.2f} {unit}"
    if value < 100.0:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"