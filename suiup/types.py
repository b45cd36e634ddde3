"""Core data types: repositories, releases, binaries and networks."""

from __future__ import annotations

import json
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from suiup.paths import installed_binaries_file


class SuiupError(Exception):
    """Error raised for any failed suiup operation."""


def _write_json(path: Path, data: Any) -> None:
    Path(path).write_text(json.dumps(data, indent=2))


def _read_json(path: Path) -> Any:
    try:
        return json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise SuiupError(f"Cannot parse JSON file {path}: {exc}") from exc


class Repo(Enum):
    SUI = "MystenLabs/sui"
    MVR = "MystenLabs/mvr"
    WALRUS = "MystenLabs/walrus"
    WALRUS_SITES = "MystenLabs/walrus-sites"

    def binary_name(self) -> str:
        """Name of the binary published by this repository."""
        return _BINARY_NAMES[self]

    def __str__(self) -> str:
        return self.value


_BINARY_NAMES = {
    Repo.MVR: "mvr",
    Repo.SUI: "sui",
    Repo.WALRUS: "walrus",
    Repo.WALRUS_SITES: "site-builder",
}


@dataclass
class Asset:
    browser_download_url: str
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Asset:
        try:
            return cls(browser_download_url=data["browser_download_url"], name=data["name"])
        except (KeyError, TypeError) as exc:
            raise SuiupError(f"Invalid asset data: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {"browser_download_url": self.browser_download_url, "name": self.name}


@dataclass
class Release:
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Release:
        try:
            assets = data["assets"]
        except (KeyError, TypeError) as exc:
            raise SuiupError(f"Invalid release data: {exc}") from exc
        return cls(assets=[Asset.from_dict(a) for a in assets])

    def to_dict(self) -> dict[str, Any]:
        return {"assets": [a.to_dict() for a in self.assets]}


@dataclass
class BinaryVersion:
    binary_name: str
    network_release: str
    version: str
    debug: bool
    path: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BinaryVersion:
        try:
            return cls(
                binary_name=data["binary_name"],
                network_release=data["network_release"],
                version=data["version"],
                debug=bool(data["debug"]),
                path=data.get("path"),
            )
        except (KeyError, TypeError) as exc:
            raise SuiupError(f"Invalid binary data: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "binary_name": self.binary_name,
            "network_release": self.network_release,
            "version": self.version,
            "debug": self.debug,
            "path": self.path,
        }

    def __str__(self) -> str:
        text = f"{self.binary_name}-{self.version}"
        return f"{text} (debug build)" if self.debug else text


@dataclass
class Binaries:
    binaries: list[BinaryVersion] = field(default_factory=list)

    @classmethod
    def from_defaults(cls, mapping: Mapping[str, Any]) -> Binaries:
        """Build from the default-version mapping ``name -> (network, version, debug)``."""
        return cls(
            binaries=[
                BinaryVersion(
                    binary_name=name,
                    network_release=network,
                    version=version,
                    debug=bool(debug),
                )
                for name, (network, version, debug) in sorted(mapping.items())
            ]
        )

    def __str__(self) -> str:
        grouped: dict[str, list[BinaryVersion]] = defaultdict(list)
        for b in self.binaries:
            grouped[b.network_release].append(b)
        lines = []
        for network in sorted(grouped):
            lines.append(f"[{network} release/branch]")
            for b in grouped[network]:
                suffix = " (debug build)" if b.binary_name == "sui" and b.debug else ""
                lines.append(f"    {b.binary_name}-{b.version}{suffix}")
        return "".join(line + "\n" for line in lines)


class InstalledBinaries:
    """The set of installed binaries, persisted as JSON."""

    def __init__(self, binaries: list[BinaryVersion] | None = None) -> None:
        self._binaries: list[BinaryVersion] = list(binaries or [])

    @classmethod
    def create_file(cls, path: Path) -> None:
        _write_json(path, cls()._to_dict())

    @classmethod
    def load(cls) -> InstalledBinaries:
        """Read the installed binaries file."""
        data = _read_json(installed_binaries_file())
        try:
            entries = data["binaries"]
        except (KeyError, TypeError) as exc:
            raise SuiupError(f"Invalid installed binaries file: {exc}") from exc
        return cls([BinaryVersion.from_dict(e) for e in entries])

    def _to_dict(self) -> dict[str, Any]:
        return {"binaries": [b.to_dict() for b in self._binaries]}

    def save_to_file(self) -> None:
        _write_json(installed_binaries_file(), self._to_dict())

    def add_binary(self, binary: BinaryVersion) -> None:
        if binary not in self._binaries:
            self._binaries.append(binary)

    def remove_binary(self, binary: str) -> None:
        self._binaries = [b for b in self._binaries if b.binary_name != binary]

    def binaries(self) -> list[BinaryVersion]:
        return list(self._binaries)


class Network(Enum):
    TESTNET = "testnet"
    DEVNET = "devnet"
    MAINNET = "mainnet"

    @classmethod
    def parse(cls, s: str) -> Network:
        try:
            return cls(s)
        except ValueError:
            raise SuiupError("Invalid network") from None

    def __str__(self) -> str:
        return self.value