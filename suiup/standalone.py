"""Installation of standalone binaries published as plain release assets."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests

from suiup.handlers.download import detect_os_arch, download_file
from suiup.handlers.release import ensure_version_prefix
from suiup.paths import binaries_dir
from suiup.types import Repo, SuiupError

_TIMEOUT = 60
_WINDOWS = os.name == "nt"


@dataclass(frozen=True)
class StandaloneAsset:
    name: str
    browser_download_url: str


@dataclass
class StandaloneRelease:
    tag_name: str
    assets: list[StandaloneAsset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StandaloneRelease:
        try:
            return cls(
                tag_name=data["tag_name"],
                assets=[
                    StandaloneAsset(
                        name=a["name"], browser_download_url=a["browser_download_url"]
                    )
                    for a in data["assets"]
                ],
            )
        except (KeyError, TypeError) as exc:
            raise SuiupError(f"Invalid release data: {exc}") from exc


class StandaloneInstaller:
    """Downloads versions of a standalone binary from its repository releases."""

    def __init__(self, repo: Repo) -> None:
        self.repo = repo
        self.releases: list[StandaloneRelease] = []

    def get_releases(self) -> None:
        """Fetch the release list once; later calls reuse it."""
        if self.releases:
            return
        url = f"https://api.github.com/repos/{self.repo}/releases"
        try:
            response = requests.get(url, headers={"User-Agent": "suiup"}, timeout=_TIMEOUT)
            data = response.json()
        except requests.RequestException as exc:
            raise SuiupError(f"Could not fetch releases: {exc}") from exc
        except ValueError as exc:
            raise SuiupError(f"Failed to parse GitHub releases response: {exc}") from exc
        if not isinstance(data, list):
            raise SuiupError("Failed to parse GitHub releases response: expected a list")
        self.releases = [StandaloneRelease.from_dict(item) for item in data]

    def get_latest_release(self) -> StandaloneRelease:
        print("Downloading release list")
        if not self.releases:
            raise SuiupError(f"No {self.repo.binary_name()} releases found")
        return self.releases[0]

    def download_version(self, version: str | None = None) -> str:
        """Download ``version`` (or the latest) unless present; return the version."""
        name = self.repo.binary_name()
        if version is not None:
            version = ensure_version_prefix(version)
        else:
            if not self.releases:
                self.get_releases()
            version = self.get_latest_release().tag_name
            print(f"No version specified. Downloading latest release: {version}")

        cache_folder = binaries_dir() / "standalone"
        cache_folder.mkdir(parents=True, exist_ok=True)
        filename = f"{name}-{version}.exe" if _WINDOWS else f"{name}-{version}"
        binary_path = cache_folder / filename

        if binary_path.exists():
            print(
                f"Binary {name}-{version} already installed. Use `suiup default set "
                f"standalone {version}` to set the default version to the desired one"
            )
            return version

        if not self.releases:
            self.get_releases()

        release = next((r for r in self.releases if r.tag_name == version), None)
        if release is None:
            raise SuiupError(f"Version {version} not found")

        os_name, arch = detect_os_arch()
        asset_name = f"{name}-{os_name}-{arch}"
        if _WINDOWS:
            asset_name = f"{asset_name}.exe"

        asset = next((a for a in release.assets if a.name.startswith(asset_name)), None)
        if asset is None:
            raise SuiupError(f"No compatible binary found for your system: {os_name}-{arch}")

        download_file(asset.browser_download_url, binary_path, f"{name}-{version}", None)

        if not _WINDOWS:
            binary_path.chmod(0o755)

        return version