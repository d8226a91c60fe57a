"""Installed uiforge version."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

DISTRIBUTION = "uiforge"


def get_version() -> str:
    """Version of the installed distribution, or "0.0.0" for an uninstalled tree."""
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"
