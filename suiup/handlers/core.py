"""Shared handling of installed components: defaults, extraction and lookup."""

from __future__ import annotations

import json
import os
import shutil
import tarfile
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from suiup.handlers.version import extract_version_from_release
from suiup.paths import (
    binaries_dir,
    default_file_path,
    get_default_bin_dir,
    release_archive_dir,
)
from suiup.types import BinaryVersion, InstalledBinaries, SuiupError

_WINDOWS = os.name == "nt"

_COMPONENTS = ("sui", "mvr", "walrus", "site-builder", "move-analyzer")


def available_components() -> list[str]:
    """Names of the components suiup knows how to manage."""
    return list(_COMPONENTS)


def _with_exe(path: Path) -> Path:
    if path.suffix == ".exe":
        return path
    return path.with_name(f"{path.name}.exe")


def _read_defaults() -> dict[str, list]:
    path = default_file_path()
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise SuiupError(f"Cannot parse default version file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SuiupError(f"Invalid default version file {path}")
    return data


def update_default_version_file(
    binaries: Iterable[str], network: str, version: str, debug: bool
) -> None:
    """Record ``binaries`` as defaults for ``network`` at ``version``."""
    path = default_file_path()
    defaults = _read_defaults()
    for binary in binaries:
        defaults[binary] = [network, version, debug]
    path.write_text(json.dumps(defaults, indent=2, sort_keys=True))


def _installed_path(binary: str, network: str, version: str, debug: bool) -> Path:
    name = f"{binary}-debug" if binary == "sui" and debug else binary
    folder = binaries_dir() / network
    if version == "nightly":
        # cargo install places the binary in a `bin` folder
        folder = folder / "bin"
    path = folder / f"{name}-{version}"
    return _with_exe(path) if _WINDOWS else path


def _ask_default() -> str:
    try:
        answer = input(
            "Do you want to set this new installed version as the default one? [y/N] "
        )
    except EOFError:
        answer = ""
    return answer.strip().lower()


def _set_as_default(binary: str, network: str, version: str, debug: bool) -> None:
    filename = f"{binary}-debug-{version}" if debug else f"{binary}-{version}"
    if not version:
        filename = filename.removesuffix("-")

    binary_folder = binaries_dir() / network
    if version == "nightly":
        binary_folder = binary_folder / "bin"
    try:
        binary_folder.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SuiupError(f"Cannot create folder {binary_folder}: {exc}") from exc

    if _WINDOWS:
        filename = f"{filename}.exe"

    print(f"Installing binary to {binary_folder}/{filename}")
    src = binary_folder / filename
    dst = get_default_bin_dir() / binary
    if _WINDOWS:
        dst = _with_exe(dst)

    print(f"Setting {binary} as default")
    try:
        shutil.copyfile(src, dst)
    except OSError as exc:
        raise SuiupError(
            f"Error copying {binary} to the default folder (src: {src}, dst: {dst}): {exc}"
        ) from exc
    if not _WINDOWS:
        dst.chmod(0o755)

    print(f"[{network}] {binary}-{version} set as default")


def update_after_install(
    names: list[str], network: str, version: str, debug: bool, yes: bool
) -> None:
    """Offer to make the just-installed binaries the default ones."""
    for binary in names:
        path = _installed_path(binary, network, version, debug)
        if not path.exists():
            print(f"Binary not found at {path}. Skipping default version update.")
            return

    while True:
        answer = "y" if yes else _ask_default()
        if answer in ("y", "yes"):
            for binary in names:
                _set_as_default(binary, network, version, debug)
            update_default_version_file(names, network, version, debug)
            check_path_and_warn()
            return
        if answer in ("", "n", "no"):
            print("Keeping the current default version.")
            return
        print("Invalid input. Please enter 'y' or 'n'.")


def check_path_and_warn() -> None:
    """Warn when the default binaries directory is not on PATH."""
    local_bin = get_default_bin_dir()
    path_var = os.environ.get("PATH")
    if path_var is None:
        return
    if any(Path(p) == local_bin for p in path_var.split(os.pathsep)):
        return

    print(f"\nWARNING: {local_bin} is not in your PATH")
    if _WINDOWS:
        print("\nTo add it to your PATH:")
        print("1. Press Win + X and select 'System'")
        print("2. Click on 'Advanced system settings (might find it on the right side)'")
        print("3. Click on 'Environment Variables'")
        print("4. Under 'User variables', find and select 'Path'")
        print("5. Click 'Edit'")
        print("6. Click 'New'")
        print("7. Add the following path:")
        print("    %USERPROFILE%\\Local\\bin")
        print("8. Click 'OK' on all windows")
        print("9. Restart your terminal\n")
    else:
        print("Add one of the following lines depending on your shell:")
        print("\nFor bash/zsh (~/.bashrc or ~/.zshrc):")
        print(f'    export PATH="{local_bin}:$PATH"')
        print("\nFor fish (~/.config/fish/config.fish):")
        print(f"    fish_add_path {local_bin}")
        print("\nThen restart your shell or run one of:")
        print("    source ~/.bashrc        # for bash")
        print("    source ~/.zshrc         # for zsh")
        print("    source ~/.config/fish/config.fish  # for fish\n")


def extract_component(orig_binary: str, network: str, filename: str) -> None:
    """Extract ``orig_binary`` from a cached release archive into the binaries folder."""
    archive_path = release_archive_dir() / filename
    binary = f"{orig_binary}.exe" if _WINDOWS else orig_binary

    try:
        archive = tarfile.open(archive_path, "r:gz")
    except (OSError, tarfile.TarError) as exc:
        raise SuiupError(f"Cannot open archive file: {archive_path}") from exc

    with archive:
        try:
            member = next(
                (m for m in archive if Path(m.name).name == binary and m.isfile()),
                None,
            )
        except (OSError, tarfile.TarError) as exc:
            raise SuiupError(f"Cannot iterate through archive entries: {exc}") from exc
        if member is None:
            return

        print(f"Extracting file: {binary}")
        output_dir = binaries_dir() / network
        output_dir.mkdir(parents=True, exist_ok=True)
        version = extract_version_from_release(filename)
        binary_version = f"{orig_binary}-{version}"
        output_path = output_dir / (f"{binary_version}.exe" if _WINDOWS else binary_version)

        source = archive.extractfile(member)
        if source is None:
            raise SuiupError(f"Cannot read {binary} from the archive")
        try:
            output = output_path.open("wb")
        except OSError as exc:
            raise SuiupError(
                f"Cannot create output path ({output_path}) for extracting this file "
                f"{binary_version}: {exc}"
            ) from exc
        with source, output:
            try:
                shutil.copyfileobj(source, output)
            except (OSError, tarfile.TarError) as exc:
                raise SuiupError(
                    f"Cannot copy the file ({orig_binary}) into the output path: {exc}"
                ) from exc
        print(f" '{binary}' extracted successfully!")

        if not _WINDOWS:
            try:
                output_path.chmod(member.mode)
            except OSError as exc:
                raise SuiupError(
                    f"Cannot apply the original file permissions in a unix system: {exc}"
                ) from exc


def check_if_binaries_exist(binary: str, network: str, version: str) -> bool:
    """Whether ``binary`` at ``version`` is present in the network's binaries folder."""
    binary_version = f"{binary}-{version}" if version else binary
    if _WINDOWS:
        binary_version = f"{binary_version}.exe"
    return (binaries_dir() / network / binary_version).exists()


def installed_binaries_grouped_by_network(
    installed_binaries: InstalledBinaries | None = None,
) -> dict[str, list[BinaryVersion]]:
    """Installed binaries keyed by network release, keys in sorted order."""
    if installed_binaries is None:
        installed_binaries = InstalledBinaries.load()
    grouped: dict[str, list[BinaryVersion]] = defaultdict(list)
    for b in installed_binaries.binaries():
        grouped[b.network_release].append(b)
    return {network: grouped[network] for network in sorted(grouped)}