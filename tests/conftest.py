"""Shared fixtures: an in-memory Steam served through httpx.MockTransport."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


class FakeSteam:
    """Route table keyed by ``scheme://host/path``; records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, response: httpx.Response | Handler) -> None:
        self.routes[url] = response

    def requested(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if _key(r.url) == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(_key(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return route

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _key(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.netloc.decode()}{url.path}"


@pytest.fixture()
def steam() -> FakeSteam:
    return FakeSteam()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of the tests."""
    for key in (
        "STEAM_API_KEY",
        "STEAMSCRAPE_CACHE_DIR",
        "STEAMSCRAPE_STORE_ORIGIN",
        "STEAMSCRAPE_API_BASE",
        "STEAMSCRAPE_TIMEOUT",
        "STEAMSCRAPE_CONCURRENCY",
    ):
        monkeypatch.delenv(key, raising=False)
