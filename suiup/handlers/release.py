"""Fetching, caching and querying the release lists of the tool repositories."""

from __future__ import annotations

import json
from pathlib import Path

import requests

from suiup.handlers.version import extract_version_from_release
from suiup.paths import get_suiup_cache_dir
from suiup.types import Release, Repo, SuiupError

_NETWORKS = ("testnet", "devnet", "mainnet")
_TIMEOUT = 60


def _cache_name(repo: Repo) -> str:
    return str(repo).replace("/", "_")


def _etag_file(repo: Repo) -> Path:
    return get_suiup_cache_dir() / f"etag_{_cache_name(repo)}.txt"


def _releases_file(repo: Repo) -> Path:
    return get_suiup_cache_dir() / f"releases_{_cache_name(repo)}.txt"


def _status_text(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".rstrip()


def release_list(
    repo: Repo, github_token: str | None = None
) -> tuple[list[Release], str | None]:
    """Fetch the releases of ``repo``, using the cached list when unchanged."""
    url = f"https://api.github.com/repos/{repo}/releases"
    headers = {"User-Agent": "suiup"}
    if github_token is not None:
        headers["Authorization"] = f"token {github_token}"
    try:
        headers["If-None-Match"] = read_etag_file(repo)
    except SuiupError:
        pass

    try:
        response = requests.get(url, headers=headers, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise SuiupError(f"Could not send request: {exc}") from exc

    if response.status_code == 304:
        try:
            cached = load_cached_release_list(repo)
        except SuiupError as exc:
            raise SuiupError(f"Cannot load release list from cache: {exc}") from exc
        if cached is not None:
            releases, etag = cached
            return releases, etag

    etag = response.headers.get("ETag")

    if not 200 <= response.status_code < 300:
        body = response.text
        raise SuiupError(
            f"GitHub API request failed with status {_status_text(response)}: {body}"
        )

    try:
        releases = [Release.from_dict(item) for item in response.json()]
    except (ValueError, TypeError, SuiupError) as exc:
        raise SuiupError(f"Failed to parse GitHub releases response: {exc}") from exc

    save_release_list(repo, releases, etag)
    return releases, etag


def read_etag_file(repo: Repo) -> str:
    """Return the cached ETag for ``repo``, or an empty string if none is stored."""
    etag_file = _etag_file(repo)
    if not etag_file.exists():
        return ""
    try:
        return etag_file.read_text()
    except OSError as exc:
        raise SuiupError(f"Cannot read from file {etag_file}") from exc


def save_release_list(repo: Repo, releases: list[Release], etag: str | None) -> None:
    """Write the release list and its ETag to the cache directory."""
    print("Saving releases list to cache")
    cache_dir = get_suiup_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)

    cache_file = _releases_file(repo)
    etag_file = _etag_file(repo)
    content = json.dumps([r.to_dict() for r in releases], indent=2)
    try:
        cache_file.write_text(content)
    except OSError as exc:
        raise SuiupError(f"Could not write cache releases file: {cache_file}") from exc
    if etag is not None:
        try:
            etag_file.write_text(etag)
        except OSError as exc:
            raise SuiupError(f"Could not write ETag file: {etag_file}") from exc


def load_cached_release_list(repo: Repo) -> tuple[list[Release], str] | None:
    """Return the cached release list and ETag, or None if either is missing."""
    cache_file = _releases_file(repo)
    etag_file = _etag_file(repo)
    if not (cache_file.exists() and etag_file.exists()):
        return None

    try:
        raw = cache_file.read_text()
    except OSError as exc:
        raise SuiupError(f"Cannot read from file {cache_file}") from exc
    try:
        releases = [Release.from_dict(item) for item in json.loads(raw)]
    except (ValueError, TypeError, SuiupError) as exc:
        raise SuiupError(
            f"Cannot deserialize the releases cached file {cache_file}"
        ) from exc
    try:
        etag = etag_file.read_text()
    except OSError as exc:
        raise SuiupError(f"Cannot read from file {etag_file}") from exc
    return releases, etag


def _has_asset_containing(release: Release, text: str) -> bool:
    return any(text in asset.name for asset in release.assets)


def find_last_release_by_network(releases: list[Release], network: str) -> Release | None:
    """First release that has an asset for ``network``."""
    return next((r for r in releases if _has_asset_containing(r, network)), None)


def last_release_for_network(releases: list[Release], network: str) -> tuple[str, str]:
    """Return ``(network, version)`` of the latest release for ``network``."""
    release = find_last_release_by_network(releases, network)
    if release is None:
        raise SuiupError(f"No release found for {network}")
    return network, extract_version_from_release(release.assets[0].name)


def find_networks_with_version(releases: list[Release], version: str) -> list[str]:
    """Networks for which ``version`` has been released."""
    version = ensure_version_prefix(version)
    return [
        network
        for network in _NETWORKS
        if any(_has_asset_containing(r, f"{network}-{version}") for r in releases)
    ]


def ensure_version_prefix(version: str) -> str:
    """Add a leading ``v`` to ``version`` if it lacks one."""
    return version if version.startswith("v") else f"v{version}"