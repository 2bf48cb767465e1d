"""HTTP utilities for vendor adapters."""

from __future__ import annotations

from typing import Any

import httpx

from amora.errors import ProviderError, ProviderTimeout

_DEFAULT_HEADERS = {
    "User-Agent": "amora/0.1",
    "Accept": "application/json",
}

_ERROR_BODY_CHARS = 300


async def request(
    provider: str,
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    json: Any = None,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Send one request; translate failures into ``ProviderError``.

    Non-2xx statuses raise ``ProviderError`` carrying the status code and
    the start of the body. Transport timeouts raise ``ProviderTimeout``.
    """
    merged = {**_DEFAULT_HEADERS, **(headers or {})}
    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, transport=transport
        ) as client:
            resp = await client.request(method, url, headers=merged, json=json)
    except httpx.TimeoutException as exc:
        raise ProviderTimeout(provider, timeout * 1000) from exc
    except httpx.HTTPError as exc:
        raise ProviderError(provider, f"request failed: {exc}") from exc

    if resp.is_error:
        body = resp.text[:_ERROR_BODY_CHARS].strip()
        raise ProviderError(
            provider,
            f"HTTP {resp.status_code}: {body or resp.reason_phrase}",
            status_code=resp.status_code,
        )
    return resp


def json_body(provider: str, resp: httpx.Response) -> Any:
    """Decode a JSON body or raise ``ProviderError``."""
    try:
        return resp.json()
    except ValueError as exc:
        raise ProviderError(provider, "malformed JSON response") from exc
