"""
Version information for the UserIntent SDK.

The installed distribution metadata is authoritative. Source checkouts read
``pyproject.toml`` instead; ``UNKNOWN_VERSION`` is reported when neither is
available.
"""
import importlib.metadata
import pathlib
from typing import Optional

import tomli

DISTRIBUTION = "userintent-sdk"
UNKNOWN_VERSION = "0.0.0"


def _pyproject_version() -> Optional[str]:
    path = pathlib.Path(__file__).parent.parent / "pyproject.toml"
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return None


try:
    __version__ = importlib.metadata.version(DISTRIBUTION)
except importlib.metadata.PackageNotFoundError:
    __version__ = _pyproject_version() or UNKNOWN_VERSION
