"""Resolución de perfiles de red.

Lookup puro sobre un `ProjectConfig` ya cargado (sin I/O).
"""

from __future__ import annotations

from core.domain.errors import NetworkNotFound
from core.domain.models import ProjectConfig, NetworkProfile


def list_networks(config: ProjectConfig) -> list[str]:
    return list(config.networks)


def resolve_network(name: str, config: ProjectConfig) -> NetworkProfile:
    """Return the profile configured under `name`.

    Names are matched exactly (case and surrounding whitespace included);
    anything else raises `NetworkNotFound`.
    """

    profile = config.networks.get(name)
    if profile is None:
        raise NetworkNotFound(name, list_networks(config))
    return profile
