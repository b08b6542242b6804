"""Outbound HTTP with bounded retries.

Every upstream call in the pipeline goes through :func:`fetch_with_retry`:

- 2xx responses are returned to the caller.
- 4xx responses are not retried and yield ``None``.
- 5xx responses, timeouts and transport errors are retried up to
  ``settings.HTTP_MAX_RETRIES`` times with a fixed delay, then yield ``None``.

Nothing here raises on network failure; callers decide what a missing body means.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger

log = get_logger("core.http")

DEFAULT_TIMEOUT = 15.0


@asynccontextmanager
async def client_scope(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": settings.HTTP_USER_AGENT},
    ) as owned:
        yield owned


async def fetch_with_retry(
    url: str,
    *,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    json: Any = None,
    auth: Optional[httpx.Auth | tuple[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
    source: str = "http",
) -> Optional[httpx.Response]:
    retries = settings.HTTP_MAX_RETRIES if max_retries is None else max_retries
    delay = settings.HTTP_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
    attempts = max(retries, 0) + 1

    async with client_scope(client) as http:
        for attempt in range(1, attempts + 1):
            try:
                # httpx bounds each phase; wait_for bounds the whole attempt
                resp = await asyncio.wait_for(
                    http.request(
                        method,
                        url,
                        params=params,
                        headers=headers,
                        json=json,
                        auth=auth,
                        timeout=timeout,
                    ),
                    timeout,
                )
            except (httpx.HTTPError, asyncio.TimeoutError) as exc:
                log.warning(f"{source}: attempt {attempt}/{attempts} failed for {url}: {exc!r}")
            else:
                if resp.is_success:
                    return resp
                if 400 <= resp.status_code < 500:
                    log.warning(f"{source}: HTTP {resp.status_code} from {url}; not retrying")
                    return None
                log.warning(f"{source}: attempt {attempt}/{attempts} got HTTP {resp.status_code} from {url}")

            if attempt < attempts and delay > 0:
                await asyncio.sleep(delay)

    log.error(f"{source}: giving up on {url} after {attempts} attempts")
    return None


async def fetch_json(url: str, **kwargs: Any) -> Any:
    """Fetch ``url`` and decode the JSON body, or return ``None``."""
    source = kwargs.get("source", "http")
    resp = await fetch_with_retry(url, **kwargs)
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        log.warning(f"{source}: malformed JSON from {url}: {exc}")
        return None
