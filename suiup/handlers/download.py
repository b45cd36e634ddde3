"""Downloading release archives and binaries."""

from __future__ import annotations

import hashlib
import platform
import time
from pathlib import Path

import requests
from tqdm import tqdm

from suiup.handlers.release import (
    ensure_version_prefix,
    find_last_release_by_network,
    find_networks_with_version,
    release_list,
)
from suiup.handlers.version import extract_version_from_release
from suiup.paths import release_archive_dir
from suiup.types import Release, Repo, SuiupError

_NETWORKS = ("testnet", "devnet", "mainnet")
_TIMEOUT = 60
_CHUNK_SIZE = 8192


def generate_network_suggestions_error(
    repo: Repo,
    releases: list[Release],
    version: str | None,
    requested_network: str,
) -> SuiupError:
    """Build an error that suggests networks where the release does exist."""
    binary_name = repo.binary_name()

    if repo is Repo.MVR:
        if version is not None:
            return SuiupError(
                f"{binary_name} version {version} not found. {binary_name} is a standalone "
                f"binary - try: suiup install {binary_name} {version}"
            )
        return SuiupError(
            f"{binary_name} release not found. {binary_name} is a standalone binary "
            f"- try: suiup install {binary_name}"
        )

    if version is not None:
        networks = find_networks_with_version(releases, version)
        if not networks:
            return SuiupError(f"Release {requested_network}-{version} not found")
        suggestions = "\n  ".join(
            f"suiup install {binary_name}@{net}-{version}" for net in networks
        )
        return SuiupError(
            f"Release {requested_network}-{version} not found. However, version {version} "
            f"is available for other networks:\n\nTry one of these commands:\n  {suggestions}"
        )

    networks = [
        net
        for net in _NETWORKS
        if any(net in a.name for r in releases for a in r.assets)
    ]
    if not networks:
        return SuiupError("Could not find any releases")
    suggestions = "\n  ".join(f"suiup install {binary_name}@{net}" for net in networks)
    return SuiupError(
        f"No releases found for {requested_network} network. Available networks:"
        f"\n\nTry one of these commands:\n  {suggestions}"
    )


def detect_os_arch() -> tuple[str, str]:
    """Return the ``(os, arch)`` pair used in release asset names."""
    os_name = {"Linux": "ubuntu", "Windows": "windows", "Darwin": "macos"}.get(
        platform.system()
    )
    if os_name is None:
        raise SuiupError("Unsupported OS. Supported only: Linux, Windows, MacOS")

    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        arch = "x86_64"
    elif machine in ("aarch64", "arm64"):
        arch = "arm64" if os_name == "macos" else "aarch64"
    else:
        raise SuiupError("Unsupported architecture. Supported only: x86_64, aarch64")

    print(f"Detected: {os_name}-{arch}...")
    return os_name, arch


def download_release_at_version(
    repo: Repo, network: str, version: str, github_token: str | None = None
) -> str:
    """Download the archive of ``version`` for ``network`` and return its file name."""
    os_name, arch = detect_os_arch()
    version = ensure_version_prefix(version)
    tag = f"{network}-{version}"
    print(f"Searching for release with tag: {tag}...")

    releases, _ = release_list(repo, github_token)
    release = next(
        (r for r in releases if any(tag in a.name for a in r.assets)), None
    )
    if release is not None:
        return download_asset_from_github(release, os_name, arch, github_token)

    headers = {"User-Agent": "suiup"}
    if github_token is not None:
        headers["Authorization"] = f"token {github_token}"
    url = f"https://api.github.com/repos/{repo}/releases/tags/{tag}"
    try:
        response = requests.get(url, headers=headers, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise SuiupError(f"Could not send request: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise generate_network_suggestions_error(repo, releases, version, network)

    try:
        release = Release.from_dict(response.json())
    except (ValueError, TypeError, SuiupError) as exc:
        raise SuiupError(f"Failed to parse GitHub release response: {exc}") from exc
    return download_asset_from_github(release, os_name, arch, github_token)


def download_latest_release(
    repo: Repo, network: str, github_token: str | None = None
) -> str:
    """Download the newest archive for ``network`` and return its file name."""
    print("Downloading release list")
    releases, _ = release_list(repo, github_token)
    os_name, arch = detect_os_arch()

    last_release = find_last_release_by_network(releases, network)
    if last_release is None:
        raise generate_network_suggestions_error(repo, releases, None, network)

    print(
        f"Last {network} release: "
        f"{extract_version_from_release(last_release.assets[0].name)}"
    )
    return download_asset_from_github(last_release, os_name, arch, github_token)


def _md5_of(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _parse_length(value: str | None) -> int:
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0


def download_file(
    url: str, download_to: Path, name: str, github_token: str | None = None
) -> str:
    """Download ``url`` to ``download_to``, reusing a verified cached copy."""
    download_to = Path(download_to)
    headers = {"User-Agent": "suiup"}
    if github_token is not None and "github.com" in url:
        headers["Authorization"] = f"token {github_token}"

    try:
        response = requests.get(url, headers=headers, stream=True, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise SuiupError(f"Could not send request: {exc}") from exc

    with response:
        if not 200 <= response.status_code < 300:
            body = response.text
            status = f"{response.status_code} {response.reason or ''}".rstrip()
            raise SuiupError(f"Failed to download (status {status}): {body}")

        total_size = _parse_length(response.headers.get("Content-Length"))
        if total_size == 0:
            # Google storage reports the size in its own header.
            total_size = _parse_length(response.headers.get("x-goog-stored-content-length"))

        md5_path = download_to.with_suffix(".md5")
        if download_to.exists():
            if download_to.stat().st_size == total_size:
                if not md5_path.exists():
                    print(f"Found {name} in cache (no md5 to check)")
                    return name
                if _md5_of(download_to) == md5_path.read_text().strip():
                    print(f"Found {name} in cache, md5 verified")
                    return name
                print(f"MD5 mismatch for {name}, re-downloading...")
            download_to.unlink()

        start = time.monotonic()
        downloaded = 0
        try:
            with download_to.open("wb") as fh, tqdm(
                total=total_size or None,
                unit="B",
                unit_scale=True,
                desc="Downloading release",
            ) as bar:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if not chunk:
                        continue
                    fh.write(chunk)
                    downloaded += len(chunk)
                    bar.update(len(chunk))
                    elapsed = time.monotonic() - start
                    if elapsed > 0:
                        bar.set_postfix_str(f"Speed: {int(downloaded / elapsed)} B/s")
                bar.set_postfix_str("Download complete")
        except requests.RequestException as exc:
            raise SuiupError(f"Error while downloading {name}: {exc}") from exc

    if md5_path.exists():
        local_md5 = _md5_of(download_to)
        expected_md5 = md5_path.read_text().strip()
        if local_md5 != expected_md5:
            raise SuiupError(
                f"MD5 check failed for {name}: expected {expected_md5}, got {local_md5}"
            )
        print(f"MD5 check passed for {name}")

    return name


def download_asset_from_github(
    release: Release, os_name: str, arch: str, github_token: str | None = None
) -> str:
    """Download the asset of ``release`` matching the platform; return its name."""
    os_lower = os_name.lower()
    asset = next(
        (a for a in release.assets if arch in a.name and os_lower in a.name), None
    )
    if asset is None:
        raise SuiupError(f"Asset not found for {os_name}-{arch}")
    file_path = release_archive_dir() / asset.name
    return download_file(asset.browser_download_url, file_path, asset.name, github_token)