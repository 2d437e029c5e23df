from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from core.config import AppSettings
from core.domain.errors import InvalidPayload, TransportFailure
from core.domain.models import REQUIRED_STAKE
from core.services.validator import (
    ValidatorHooks,
    check_stake_requirement,
    evaluate_stake,
    probe_endpoints,
    validate_network_connectivity,
)


class FakeBalances:
    def __init__(self, balance: int | None = None, error: Exception | None = None) -> None:
        self.balance = balance
        self.error = error
        self.calls: list[str] = []

    async def get_balance(self, address: str) -> int:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        assert self.balance is not None
        return self.balance


@pytest.mark.parametrize(
    ("balance", "expected"),
    [(REQUIRED_STAKE, True), (REQUIRED_STAKE - 1, False), (0, False), (10**9, True)],
)
def test_stake_threshold(balance: int, expected: bool) -> None:
    assert asyncio.run(check_stake_requirement(FakeBalances(balance), "agx1")) is expected


def test_stake_outcome_is_reported() -> None:
    messages: list[str] = []
    hooks = ValidatorHooks(success=messages.append, failure=lambda m: messages.append(f"FAIL {m}"))

    asyncio.run(check_stake_requirement(FakeBalances(100_000), "agx1", hooks))
    asyncio.run(check_stake_requirement(FakeBalances(99_999), "agx1", hooks))

    assert messages == [
        "Sufficient AGX balance: 100,000 AGX",
        "FAIL Insufficient AGX balance. Required: 100,000, Available: 99,999",
    ]


def test_stake_result_fields() -> None:
    result = asyncio.run(evaluate_stake(FakeBalances(42), "agx1"))

    assert (result.balance, result.required, result.sufficient) == (42, 100_000, False)


def test_stake_client_failure_propagates() -> None:
    source = FakeBalances(error=TransportFailure("Balance check failed", "connection refused"))

    with pytest.raises(TransportFailure):
        asyncio.run(check_stake_requirement(source, "agx1"))
    assert source.calls == ["agx1"]


def _transport(up: set[str], *, delay: float = 0.0, hang: set[str] = frozenset()) -> httpx.MockTransport:
    async def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host in hang:
            await asyncio.sleep(30)
        if delay:
            await asyncio.sleep(delay)
        if host in up:
            return httpx.Response(200, json={"status": "healthy"})
        return httpx.Response(503, json={"message": "syncing"})

    return httpx.MockTransport(handler)


ENDPOINTS = [f"http://node-{i}.test" for i in range(4)]


def test_half_reachable_passes(settings: AppSettings) -> None:
    transport = _transport({"node-0.test", "node-1.test"})

    result = asyncio.run(probe_endpoints(ENDPOINTS, settings=settings, transport=transport))

    assert (result.reachable_count, result.total_count) == (2, 4)
    assert result.percentage == 50.0
    assert result.ok
    assert asyncio.run(validate_network_connectivity(ENDPOINTS, settings=settings, transport=transport))


def test_quarter_reachable_fails(settings: AppSettings) -> None:
    transport = _transport({"node-3.test"})

    result = asyncio.run(probe_endpoints(ENDPOINTS, settings=settings, transport=transport))

    assert result.percentage == 25.0
    assert not result.ok
    assert [p.reachable for p in result.probes] == [False, False, False, True]
    assert result.probes[0].detail == "syncing"


def test_timed_out_probes_count_as_unreachable(settings: AppSettings) -> None:
    transport = _transport({"node-0.test", "node-1.test"}, hang={"node-1.test", "node-2.test"})

    started = time.monotonic()
    result = asyncio.run(probe_endpoints(ENDPOINTS, timeout=0.2, settings=settings, transport=transport))
    elapsed = time.monotonic() - started

    assert result.reachable_count == 1
    assert result.probes[1].detail == "timeout after 0.2s"
    assert elapsed < 5


def test_probes_run_concurrently(settings: AppSettings) -> None:
    transport = _transport({f"node-{i}.test" for i in range(4)}, delay=0.4)

    started = time.monotonic()
    result = asyncio.run(probe_endpoints(ENDPOINTS, timeout=2.0, settings=settings, transport=transport))
    elapsed = time.monotonic() - started

    assert result.reachable_count == 4
    # Sequential probing would take at least 1.6s.
    assert elapsed < 1.2


def test_invalid_endpoint_is_unreachable(settings: AppSettings) -> None:
    transport = _transport({"node-0.test"})

    result = asyncio.run(probe_endpoints(["node-0.test", ENDPOINTS[0]], settings=settings, transport=transport))

    assert [p.reachable for p in result.probes] == [False, True]
    assert result.probes[0].detail == "invalid endpoint URL"


@pytest.mark.parametrize("bad", ["http://bad.test:notaport", "http://bad.test:99999", "http://"])
def test_malformed_endpoint_does_not_abort_other_checks(settings: AppSettings, bad: str) -> None:
    transport = _transport({"node-0.test", "node-1.test"})

    result = asyncio.run(probe_endpoints([*ENDPOINTS[:2], bad], settings=settings, transport=transport))

    assert (result.reachable_count, result.total_count) == (2, 3)
    assert result.probes[2].reachable is False
    assert result.probes[2].detail == "invalid endpoint URL"


def test_empty_endpoint_list_is_rejected(settings: AppSettings) -> None:
    with pytest.raises(InvalidPayload):
        asyncio.run(validate_network_connectivity([], settings=settings))


def test_connectivity_summary_hook(settings: AppSettings) -> None:
    messages: list[str] = []

    ok = asyncio.run(
        validate_network_connectivity(
            ENDPOINTS[:3],
            settings=settings,
            transport=_transport({"node-0.test"}),
            hooks=ValidatorHooks(info=messages.append),
        )
    )

    assert not ok
    assert messages == ["Network connectivity: 1/3 nodes (33.3%)"]
