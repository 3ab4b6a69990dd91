"""
program_ingester
================

Utilities for ingesting timestamped program feature records and rebuilding
the parent/child hierarchy of each program they describe.
"""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Return the installed package version or '0.0.0' when unavailable."""
    try:
        return version("program-ingester")
    except PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_version"]
