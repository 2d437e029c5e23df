"""Checks de nodo validador: stake y conectividad.

Implementación:
- Stake: un único `get_balance` comparado con `REQUIRED_STAKE`.
- Conectividad: `GET /health` concurrente por endpoint, cada uno con su
  propio timeout; pasa con >= 50% alcanzables.

Nota:
- Nada se imprime aquí; la UI recibe mensajes vía `ValidatorHooks`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import httpx
from pydantic import ValidationError

from adapters.agxcl_client import AgxclClient
from core.config import AppSettings
from core.domain.errors import ClientError, InsufficientStake, InvalidPayload
from core.domain.models import (
    REQUIRED_STAKE,
    ClientConfig,
    ConnectivityResult,
    NetworkProfile,
    ProbeOutcome,
    StakeCheckResult,
)
from core.interfaces.api import BalanceSource

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0


@dataclass
class ValidatorHooks:
    """Optional callbacks for UI layers."""

    success: Callable[[str], None] | None = None
    failure: Callable[[str], None] | None = None
    info: Callable[[str], None] | None = None


def _emit(hook: Callable[[str], None] | None, message: str) -> None:
    if hook is not None:
        hook(message)


async def evaluate_stake(client: BalanceSource, address: str) -> StakeCheckResult:
    """Fetch the balance of `address` and compare it with `REQUIRED_STAKE`.

    Client failures propagate; they are never reported as an insufficient
    balance.
    """

    balance = await client.get_balance(address)
    return StakeCheckResult(balance=balance, required=REQUIRED_STAKE, sufficient=balance >= REQUIRED_STAKE)


async def check_stake_requirement(
    client: BalanceSource,
    address: str,
    hooks: ValidatorHooks | None = None,
) -> bool:
    hooks = hooks or ValidatorHooks()
    result = await evaluate_stake(client, address)
    if result.sufficient:
        message = f"Sufficient AGX balance: {result.balance:,} AGX"
        logger.info(message)
        _emit(hooks.success, message)
    else:
        message = str(InsufficientStake(result.balance, result.required))
        logger.warning(message)
        _emit(hooks.failure, message)
    return result.sufficient


async def _probe(
    endpoint: str,
    *,
    timeout: float,
    settings: AppSettings,
    transport: httpx.AsyncBaseTransport | None,
) -> ProbeOutcome:
    try:
        profile = NetworkProfile(endpoint=endpoint)
    except ValidationError:
        return ProbeOutcome(endpoint=endpoint, reachable=False, detail="invalid endpoint URL")

    client = AgxclClient(ClientConfig(endpoint=profile.endpoint), settings, timeout=timeout, transport=transport)
    try:
        async with client:
            status = await asyncio.wait_for(client.get_network_status(), timeout)
    except asyncio.TimeoutError:
        return ProbeOutcome(endpoint=endpoint, reachable=False, detail=f"timeout after {timeout:g}s")
    except ClientError as exc:
        return ProbeOutcome(endpoint=endpoint, reachable=False, detail=exc.message)
    return ProbeOutcome(endpoint=endpoint, reachable=True, detail=status.status or "ok")


async def probe_endpoints(
    endpoints: Sequence[str],
    *,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConnectivityResult:
    """Probe every endpoint's `/health` concurrently.

    Each probe is bounded by `timeout` on its own; failures and timeouts
    count as unreachable and never cancel the other probes.
    """

    if not endpoints:
        raise InvalidPayload("At least one endpoint is required for a connectivity check")

    settings = settings or AppSettings()
    outcomes = await asyncio.gather(
        *(_probe(e, timeout=timeout, settings=settings, transport=transport) for e in endpoints)
    )
    for outcome in outcomes:
        logger.debug("probe %s reachable=%s (%s)", outcome.endpoint, outcome.reachable, outcome.detail)

    reachable = sum(1 for o in outcomes if o.reachable)
    return ConnectivityResult(reachable_count=reachable, total_count=len(outcomes), probes=list(outcomes))


async def validate_network_connectivity(
    endpoints: Sequence[str],
    *,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    hooks: ValidatorHooks | None = None,
) -> bool:
    """True when at least half of `endpoints` answer their liveness probe."""

    hooks = hooks or ValidatorHooks()
    result = await probe_endpoints(endpoints, timeout=timeout, settings=settings, transport=transport)
    message = (
        f"Network connectivity: {result.reachable_count}/{result.total_count} nodes "
        f"({result.percentage:.1f}%)"
    )
    logger.info(message)
    _emit(hooks.info, message)
    return result.ok
