"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers de todas las llamadas salientes.
- Facilita testeo: el transport se sustituye por un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

SETTINGS_TIMEOUT = object()


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str = "",
    extra_headers: dict[str, str] | None = None,
    timeout: float | None | object = SETTINGS_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the application defaults.

    `timeout` overrides `settings.http_timeout_seconds`; `None` means no
    timeout at all.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    seconds = settings.http_timeout_seconds if timeout is SETTINGS_TIMEOUT else timeout
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
