"""Modelos de dominio (Pydantic v2).

Describen *qué* viaja entre la CLI, el resolver y el cliente API, no *cómo*
se obtiene.

Nota:
- Los nombres de wire (`chainType`, `contractAddress`) se mantienen como
  alias para que el JSON coincida con la API AgeFix y con el config.
- `NetworkProfile.endpoint` se parsea con `httpx.URL`: un endpoint mal
  formado falla al cargar el config, no en mitad de una request.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field, JsonValue, field_validator
from pydantic.config import ConfigDict

# Stake (in AGX units) an address must hold to operate as a validator.
REQUIRED_STAKE = 100_000

# Minimum share of reachable endpoints for a connectivity check to pass.
CONNECTIVITY_THRESHOLD = 50.0


class ChainType(str, Enum):
    """Visibility of the target chain."""

    PUBLIC = "public"
    PRIVATE = "private"


class NetworkProfile(BaseModel):
    """Connection parameters of a named network, as found in the project config."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    endpoint: str = Field(
        ...,
        min_length=1,
        description="Base URL of the AgeFix API for this network.",
    )
    chain_type: ChainType = Field(
        default=ChainType.PUBLIC,
        alias="chainType",
        description="Chain visibility (public/private).",
    )

    @field_validator("endpoint")
    @classmethod
    def _normalize_endpoint(cls, value: str) -> str:
        value = value.strip()
        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError("endpoint must be an http(s) URL")
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"endpoint is not a valid URL: {exc}") from exc
        if not url.host:
            raise ValueError("endpoint has no host")
        if url.port is not None and not 0 < url.port < 65536:
            raise ValueError(f"endpoint port out of range: {url.port}")
        return value.rstrip("/")


class CompilerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str = Field(default="0.8.0", min_length=1)


class ProjectConfig(BaseModel):
    """Contents of `agxcl.config.json`.

    Only `networks` is consumed by the core; the remaining fields are
    persisted for the user and tooling.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Project name.")
    version: str = Field(default="1.0.0", description="Project version.")
    networks: dict[str, NetworkProfile] = Field(
        default_factory=dict,
        description="Network name -> connection profile.",
    )
    compiler: CompilerSettings = Field(default_factory=CompilerSettings)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ClientConfig(BaseModel):
    """Everything an `AgxclClient` needs; built once per invocation."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., min_length=1)
    chain_type: ChainType = ChainType.PUBLIC
    api_key: str | None = Field(default=None, repr=False)

    @classmethod
    def from_profile(cls, profile: NetworkProfile, api_key: str | None = None) -> "ClientConfig":
        return cls(endpoint=profile.endpoint, chain_type=profile.chain_type, api_key=api_key or None)


class DeployRequest(BaseModel):
    """Body of `POST /api/contracts/deploy`."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., min_length=1, description="Contract source code.")
    args: list[JsonValue] = Field(default_factory=list, description="Constructor arguments.")
    chain_type: ChainType = Field(default=ChainType.PUBLIC, alias="chainType")


class CallRequest(BaseModel):
    """Body of `POST /api/contracts/{address}/call`."""

    method: str = Field(..., min_length=1, max_length=256)
    args: list[JsonValue] = Field(default_factory=list)

    @field_validator("method")
    @classmethod
    def _method_is_identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError("method must be a plain identifier")
        return value


class ContractRecord(BaseModel):
    """Contract information as returned by the API (unknown fields are kept)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    address: str | None = None
    name: str | None = None


class NetworkStatus(BaseModel):
    """Body of `GET /health` (unknown fields are kept)."""

    model_config = ConfigDict(extra="allow")

    status: str | None = None


class StakeCheckResult(BaseModel):
    balance: int
    required: int = REQUIRED_STAKE
    sufficient: bool


class ProbeOutcome(BaseModel):
    """Result of one liveness probe."""

    endpoint: str
    reachable: bool
    detail: str = ""


class ConnectivityResult(BaseModel):
    reachable_count: int = Field(..., ge=0)
    total_count: int = Field(..., ge=1)
    probes: list[ProbeOutcome] = Field(default_factory=list)

    @property
    def percentage(self) -> float:
        return self.reachable_count / self.total_count * 100

    @property
    def ok(self) -> bool:
        return self.percentage >= CONNECTIVITY_THRESHOLD
