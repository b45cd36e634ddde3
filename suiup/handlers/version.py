"""Version extraction from release archive names."""

from __future__ import annotations

import re

from suiup.types import SuiupError

_VERSION_REGEX = re.compile(r"v\d+\.\d+\.\d+")


def extract_version_from_release(release: str) -> str:
    """Return the first ``vX.Y.Z`` version found in a release file name."""
    match = _VERSION_REGEX.search(release)
    if match is None:
        raise SuiupError("Could not extract version from release")
    return match.group(0)