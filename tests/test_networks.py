from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.domain.errors import NetworkNotFound
from core.domain.models import ChainType, ProjectConfig
from core.services.networks import list_networks, resolve_network


def test_resolve_known_network(config_document: dict) -> None:
    config = ProjectConfig.model_validate(config_document)

    profile = resolve_network("privnet", config)

    assert profile.endpoint == "http://private.test"
    assert profile.chain_type is ChainType.PRIVATE


@pytest.mark.parametrize("name", ["mainnet", "Development", "", "  ", " development ", "development\n"])
def test_unknown_network_never_resolves(config_document: dict, name: str) -> None:
    config = ProjectConfig.model_validate(config_document)

    with pytest.raises(NetworkNotFound) as excinfo:
        resolve_network(name, config)

    assert excinfo.value.available == ("development", "privnet")


def test_empty_network_mapping() -> None:
    config = ProjectConfig(name="x")

    assert list_networks(config) == []
    with pytest.raises(NetworkNotFound, match="Network development not found in config"):
        resolve_network("development", config)


def test_profile_is_immutable(config_document: dict) -> None:
    profile = resolve_network("development", ProjectConfig.model_validate(config_document))

    with pytest.raises(ValidationError):
        profile.endpoint = "http://elsewhere.test"  # type: ignore[misc]
