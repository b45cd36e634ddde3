"""Self-management of the suiup executable: version checks, update and uninstall."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
import sys
import tarfile
import tempfile
import threading
import zipfile
from dataclasses import dataclass
from pathlib import Path

import requests

from suiup.handlers.download import detect_os_arch, download_file
from suiup.types import SuiupError

LATEST_RELEASE_URL = "https://api.github.com/repos/MystenLabs/suiup/releases/latest"
_DOWNLOAD_URL = "https://github.com/MystenLabs/suiup/releases/download/{tag}/{archive}"
_TIMEOUT = 60
_NUMBER = re.compile(r"\+?[0-9]+")


def _parse_number(text: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise SuiupError(f"Invalid version number: {text!r}")
    return int(text)


@dataclass(frozen=True, order=True)
class Ver:
    """A ``major.minor.patch`` version, ordered numerically."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, s: str) -> Ver:
        """Parse ``X.Y.Z`` or ``vX.Y.Z``."""
        parts = s.split(".")
        if len(parts) != 3:
            raise SuiupError("Invalid version format")
        first = parts[0][1:] if parts[0].startswith("v") else parts[0]
        return cls(_parse_number(first), _parse_number(parts[1]), _parse_number(parts[2]))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _current_exe() -> Path:
    argv0 = sys.argv[0] if sys.argv else ""
    if not argv0:
        raise SuiupError("Cannot determine the current executable")
    located = shutil.which(argv0)
    return Path(located or argv0).resolve()


def _run_version(exe: Path) -> str:
    try:
        result = subprocess.run([str(exe), "--version"], capture_output=True, check=False)
    except OSError as exc:
        raise SuiupError(f"Cannot run {exe}: {exc}") from exc
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SuiupError(f"Invalid output from {exe} --version") from exc


def _status_text(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".rstrip()


def get_latest_version() -> Ver:
    """Return the version of the latest published suiup release."""
    try:
        response = requests.get(
            LATEST_RELEASE_URL, headers={"User-Agent": "suiup"}, timeout=_TIMEOUT
        )
    except requests.RequestException as exc:
        raise SuiupError(f"Could not send request: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise SuiupError(
            "Failed to fetch latest version from GitHub "
            f"(status {_status_text(response)}): {response.text}"
        )

    try:
        tag = response.json()["tag_name"]
        if not isinstance(tag, str):
            raise TypeError("tag_name is not a string")
    except (ValueError, KeyError, TypeError) as exc:
        raise SuiupError(f"Failed to parse GitHub release response: {exc}") from exc
    return Ver.parse(tag)


def _check_for_updates_impl() -> None:
    try:
        words = _run_version(_current_exe()).split()
        if len(words) < 2:
            return
        current = Ver.parse(words[1])
        latest = get_latest_version()
    except SuiupError:
        return
    if current < latest:
        print(
            f"\n⚠️  A new version of suiup is available: v{current} → v{latest}",
            file=sys.stderr,
        )
        print("   Run 'suiup self update' to update to the latest version.\n", file=sys.stderr)


def check_for_updates() -> threading.Thread:
    """Check for a newer suiup in the background; returns the worker thread."""
    thread = threading.Thread(
        target=_check_for_updates_impl, name="suiup-update-check", daemon=True
    )
    thread.start()
    return thread


def _latest_tag() -> str:
    try:
        response = requests.get(
            LATEST_RELEASE_URL, headers={"User-Agent": "suiup"}, timeout=_TIMEOUT
        )
        tag = response.json()["tag_name"]
    except requests.RequestException as exc:
        raise SuiupError(f"Could not send request: {exc}") from exc
    except (ValueError, KeyError, TypeError) as exc:
        raise SuiupError("Failed to parse latest version from GitHub response") from exc
    if not isinstance(tag, str):
        raise SuiupError("Failed to parse latest version from GitHub response")
    return tag


def _extract_zip(archive_path: Path, dest: Path) -> None:
    try:
        with zipfile.ZipFile(archive_path) as archive:
            archive.extractall(dest)
    except (OSError, zipfile.BadZipFile) as exc:
        raise SuiupError(f"Cannot read zip archive: {archive_path}") from exc


def _extract_tar(archive_path: Path, dest: Path) -> None:
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            if hasattr(tarfile, "data_filter"):
                archive.extractall(dest, filter="data")
            else:
                archive.extractall(dest)
    except (OSError, tarfile.TarError) as exc:
        raise SuiupError(f"Cannot unpack archive file: {archive_path}") from exc


def handle_update() -> None:
    """Replace the running suiup executable with the latest release."""
    exe = _current_exe()
    current_text = _run_version(exe).strip()
    if not current_text:
        raise SuiupError(
            "Failed to get current version for suiup binary. Please update manually."
        )
    split = current_text.split(" ")
    if len(split) != 2:
        raise SuiupError(
            "Failed to parse current version for suiup binary. Please update manually."
        )
    current = Ver.parse(split[1])

    tag = _latest_tag()
    latest = Ver.parse(tag)

    if current == latest:
        print("suiup is already up to date")
        return
    print(f"Updating to latest version: {latest}")

    archive_name = find_archive_name()
    url = _DOWNLOAD_URL.format(tag=tag, archive=archive_name)

    with tempfile.TemporaryDirectory() as tmp:
        temp_dir = Path(tmp)
        archive_path = temp_dir / archive_name
        download_file(url, archive_path, "suiup", None)

        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, temp_dir)
        else:
            _extract_tar(archive_path, temp_dir)

        binary = "suiup.exe" if os.name == "nt" else "suiup"
        try:
            shutil.copy(temp_dir / binary, exe)
        except OSError as exc:
            raise SuiupError(f"Cannot replace {exe}: {exc}") from exc

    print(f"suiup updated to version {latest}")


def handle_uninstall() -> None:
    """Remove the running suiup executable."""
    exe = _current_exe()
    if exe.exists():
        exe.unlink()
        print("suiup uninstalled")
    else:
        print("suiup is not installed")


def find_archive_name() -> str:
    """Name of the suiup release archive for this platform."""
    os_name, arch = detect_os_arch()
    os_label = {
        "ubuntu": "Linux-musl",
        "linux": "Linux-musl",
        "windows": "Windows",
        "macos": "macOS",
    }.get(os_name, os_name)
    arch_label = {"x86_64": "x86_64", "aarch64": "arm64"}.get(arch, arch)
    if os_name == "windows":
        return f"suiup-{os_label}-msvc-{arch_label}.zip"
    return f"suiup-{os_label}-{arch_label}.tar.gz"