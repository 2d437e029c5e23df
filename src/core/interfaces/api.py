"""Contratos del cliente de la API AgeFix.

- `AgxclClient` cumple `ContractApi`.
- El validador solo necesita `BalanceSource` (se testea con fakes simples).
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from pydantic import JsonValue

from core.domain.models import ContractRecord, NetworkStatus


@runtime_checkable
class BalanceSource(Protocol):
    async def get_balance(self, address: str) -> int:
        """Return the balance of `address` in AGX units."""

        ...


@runtime_checkable
class ContractApi(BalanceSource, Protocol):
    """Minimal surface of a client bound to one network endpoint.

    Every method issues exactly one request and raises a `ClientError`
    subclass on failure.
    """

    async def deploy_contract(self, code: str, constructor_args: Sequence[JsonValue] = ()) -> str: ...

    async def get_contract(self, address: str) -> ContractRecord: ...

    async def call_contract(self, address: str, method: str, args: Sequence[JsonValue] = ()) -> JsonValue: ...

    async def get_network_status(self) -> NetworkStatus: ...
