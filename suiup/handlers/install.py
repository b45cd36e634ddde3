"""Installing tool binaries from network releases and standalone releases."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from suiup.handlers.core import (
    check_if_binaries_exist,
    extract_component,
    update_after_install,
)
from suiup.handlers.download import download_latest_release, download_release_at_version
from suiup.handlers.version import extract_version_from_release
from suiup.paths import binaries_dir
from suiup.standalone import StandaloneInstaller
from suiup.types import BinaryVersion, InstalledBinaries, Repo, SuiupError

_WINDOWS = os.name == "nt"


def install_binary(
    name: str,
    network: str,
    version: str,
    debug: bool,
    binary_path: Path,
    yes: bool,
) -> None:
    """Record an installed binary and offer to make it the default."""
    installed = InstalledBinaries.load()
    installed.add_binary(
        BinaryVersion(
            binary_name=name,
            network_release=network,
            version=version,
            debug=debug,
            path=str(binary_path),
        )
    )
    installed.save_to_file()
    update_after_install([name], network, version, debug, yes)


def install_from_release(
    name: str,
    network: str,
    version_spec: str | None,
    debug: bool,
    yes: bool,
    repo: Repo,
    github_token: str | None = None,
) -> None:
    """Install ``name`` from a network release, the latest one unless a version is given."""
    if version_spec is not None:
        filename = download_release_at_version(repo, network, version_spec, github_token)
    else:
        filename = download_latest_release(repo, network, github_token)

    version = extract_version_from_release(filename)
    binary_name = f"{name}-debug" if debug and name == "sui" else name

    if check_if_binaries_exist(binary_name, network, version):
        print(
            f"Binary {name}-{version} already installed. "
            "Use `suiup default set` to change the default binary."
        )
        return

    print(f"Adding binary: {name}-{version}")
    extract_component(binary_name, network, filename)

    binary_filename = f"{name}-{version}"
    if _WINDOWS:
        binary_filename = f"{binary_filename}.exe"
    binary_path = binaries_dir() / network / binary_filename
    install_binary(name, network, version, debug, binary_path, yes)


def install_standalone(version: str | None, repo: Repo, yes: bool) -> None:
    """Install a standalone binary of ``repo`` at ``version`` or the latest release."""
    network = "standalone"
    binary_name = repo.binary_name()

    if check_if_binaries_exist(binary_name, network, version or ""):
        shown = version or ""
        print(
            f"Binary {binary_name}-{shown} already installed. Use `suiup default set "
            f"{binary_name} {shown}` to set the default version to the specified one."
        )
        return

    installer = StandaloneInstaller(repo)
    installed_version = installer.download_version(version)
    print(f"Adding binary: {binary_name}-{installed_version}")

    binary_path = binaries_dir() / network / f"{binary_name}-{installed_version}"
    install_binary(binary_name, network, installed_version, False, binary_path, yes)


def check_command_installed(command: str) -> None:
    """Raise unless ``command --version`` runs successfully."""
    try:
        result = subprocess.run([command, "--version"], capture_output=True, check=False)
    except OSError as exc:
        raise SuiupError(f"Failed to execute {command} command") from exc
    if result.returncode != 0:
        raise SuiupError(f"{command} is not installed")
    output = result.stdout.decode("utf-8", errors="replace")
    print(f"{command} is installed: {output}", end="")