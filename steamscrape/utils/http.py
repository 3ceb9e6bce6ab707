"""HTTP utilities for steamscrape."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from steamscrape.errors import ErrorKind, ScrapeError

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/json",
    "Accept-Language": "en-US,en;q=0.9",
}


def new_client(timeout: float = 30.0, **kwargs: Any) -> httpx.AsyncClient:
    """Build the client shared by one run."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers=_DEFAULT_HEADERS,
        **kwargs,
    )


@asynccontextmanager
async def _client_or_new(
    client: httpx.AsyncClient | None, timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with new_client(timeout) as owned:
        yield owned


async def fetch(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: dict[str, str] | None = None,
    cookies: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 30.0,
) -> httpx.Response:
    """GET *url* once and return the successful response.

    Non-2xx statuses and transport errors are raised as ``FETCH`` errors;
    nothing is retried.
    """
    async with _client_or_new(client, timeout) as http:
        try:
            # httpx deprecated per-request cookies, so send them as a header
            merged = dict(headers or {})
            if cookies:
                merged["Cookie"] = "; ".join(f"{k}={v}" for k, v in cookies.items())
            resp = await http.get(url, headers=merged, params=params)
            resp.raise_for_status()
        except httpx.InvalidURL as exc:
            raise ScrapeError(ErrorKind.LOCATOR, f"Invalid URL: {url!r}", cause=exc) from exc
        except httpx.HTTPStatusError as exc:
            raise ScrapeError(
                ErrorKind.FETCH,
                f"bad status {exc.response.status_code} for {url}",
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ScrapeError(
                ErrorKind.FETCH, f"transport error for {url}", cause=exc
            ) from exc
        return resp


async def fetch_json(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 30.0,
) -> Any:
    resp = await fetch(
        url,
        client=client,
        headers={"Accept": "application/json"},
        params=params,
        timeout=timeout,
    )
    return resp.json()

