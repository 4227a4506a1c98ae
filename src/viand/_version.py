"""Viand package version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Version of the installed ``viand`` distribution, ``0.0.0`` when not installed."""
    try:
        return version("viand")
    except PackageNotFoundError:
        return "0.0.0"
