"""Installed package version."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    try:
        return version("agxcl")
    except PackageNotFoundError:
        # Running from a source checkout (`python main.py`).
        return "0.0.0+dev"
