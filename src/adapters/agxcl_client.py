"""Cliente HTTP de la API de contratos AgeFix.

Responsabilidad:
- Una instancia = un endpoint, con su propio `httpx.AsyncClient` (nunca se
  comparte entre invocaciones).
- Cada método público hace exactamente una request; no hay reintentos.

Errores:
- Sin respuesta => `TransportFailure`.
- Status no-2xx o body inutilizable => `RemoteRejection`.
Ambos llevan la etiqueta de la operación y el `message` del upstream si vino.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx
from pydantic import JsonValue, ValidationError

from adapters.http_client import SETTINGS_TIMEOUT, build_async_client
from core.config import AppSettings
from core.domain.errors import InvalidPayload, RemoteRejection, TransportFailure
from core.domain.models import (
    CallRequest,
    ClientConfig,
    ContractRecord,
    DeployRequest,
    NetworkProfile,
    NetworkStatus,
)

logger = logging.getLogger(__name__)

DEPLOY_FAILED = "Contract deployment failed"
FETCH_FAILED = "Failed to fetch contract"
CALL_FAILED = "Contract call failed"
NETWORK_UNREACHABLE = "Network unreachable"
BALANCE_FAILED = "Balance check failed"

HEALTH_PATH = "/health"


def _upstream_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    reason = response.reason_phrase
    text = f"Request failed with status code {response.status_code}"
    return f"{text} ({reason})" if reason else text


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def _address_path(address: str) -> str:
    address = address.strip()
    if not address:
        raise InvalidPayload("contract address must not be empty")
    return quote(address, safe="")


class AgxclClient:
    """Async client for one AgeFix API endpoint."""

    def __init__(
        self,
        config: ClientConfig,
        settings: AppSettings | None = None,
        *,
        timeout: float | None | object = SETTINGS_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        headers: dict[str, str] = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._http = build_async_client(
            settings,
            base_url=config.endpoint,
            extra_headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def for_profile(
        cls,
        profile: NetworkProfile,
        settings: AppSettings | None = None,
        **kwargs: Any,
    ) -> "AgxclClient":
        settings = settings or AppSettings()
        return cls(ClientConfig.from_profile(profile, settings.api_key), settings, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    async def __aenter__(self) -> "AgxclClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s%s", method, self._config.endpoint, path)
        try:
            response = await self._http.request(method, path, json=body)
        except httpx.TimeoutException as exc:
            raise TransportFailure(operation, f"timeout ({exc.__class__.__name__})") from exc
        except httpx.TransportError as exc:
            raise TransportFailure(operation, str(exc) or exc.__class__.__name__) from exc

        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
        if not response.is_success:
            raise RemoteRejection(operation, _upstream_message(response), status_code=response.status_code)
        return response

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._send(operation, method, path, body=body)
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteRejection(
                operation, "response body is not valid JSON", status_code=response.status_code
            ) from exc

    async def deploy_contract(self, code: str, constructor_args: Sequence[JsonValue] = ()) -> str:
        """Deploy contract source and return the new contract address."""

        try:
            payload = DeployRequest(code=code, args=list(constructor_args), chain_type=self._config.chain_type)
        except ValidationError as exc:
            raise InvalidPayload(f"{DEPLOY_FAILED}: {_validation_message(exc)}") from exc

        data = await self._request(
            DEPLOY_FAILED,
            "POST",
            "/api/contracts/deploy",
            body=payload.model_dump(mode="json", by_alias=True),
        )
        address = data.get("contractAddress") if isinstance(data, dict) else None
        if not isinstance(address, str) or not address:
            raise RemoteRejection(DEPLOY_FAILED, "response has no 'contractAddress'")
        logger.info("Deployed contract at %s on %s", address, self._config.endpoint)
        return address

    async def get_contract(self, address: str) -> ContractRecord:
        data = await self._request(FETCH_FAILED, "GET", f"/api/contracts/{_address_path(address)}")
        if not isinstance(data, dict):
            raise RemoteRejection(FETCH_FAILED, "response is not a JSON object")
        return ContractRecord.model_validate(data)

    async def call_contract(self, address: str, method: str, args: Sequence[JsonValue] = ()) -> JsonValue:
        """Invoke `method` on a deployed contract and return its `result`."""

        path = f"/api/contracts/{_address_path(address)}/call"
        try:
            payload = CallRequest(method=method, args=list(args))
        except ValidationError as exc:
            raise InvalidPayload(f"{CALL_FAILED}: {_validation_message(exc)}") from exc

        data = await self._request(CALL_FAILED, "POST", path, body=payload.model_dump(mode="json"))
        if not isinstance(data, dict) or "result" not in data:
            raise RemoteRejection(CALL_FAILED, "response has no 'result'")
        return data["result"]

    async def get_network_status(self) -> NetworkStatus:
        """Liveness check; any 2xx answer counts, even with a plain-text body."""

        response = await self._send(NETWORK_UNREACHABLE, "GET", HEALTH_PATH)
        try:
            data = response.json()
        except ValueError:
            return NetworkStatus(status=response.text.strip() or "ok")
        if not isinstance(data, dict):
            return NetworkStatus(status=str(data))
        return NetworkStatus.model_validate(data)

    async def get_balance(self, address: str) -> int:
        path = f"/api/wallet/balance/{_address_path(address)}"
        data = await self._request(BALANCE_FAILED, "GET", path)
        balance = data.get("balance") if isinstance(data, dict) else None
        # bool is an int subclass; a JSON true is not a balance.
        if isinstance(balance, bool):
            balance = None
        if isinstance(balance, float) and balance.is_integer():
            balance = int(balance)
        if not isinstance(balance, int):
            raise RemoteRejection(BALANCE_FAILED, "response has no integer 'balance'")
        return balance
