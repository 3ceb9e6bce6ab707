"""Configuration management for steamscrape."""

from __future__ import annotations

import os
from dataclasses import dataclass

from steamscrape.errors import ErrorKind, ScrapeError


@dataclass(frozen=True)
class Config:
    """Global configuration."""

    steam_api_key: str | None = None
    cache_dir: str = "cache"
    store_origin: str = "http://store.steampowered.com"
    api_base: str = "https://api.steampowered.com"
    http_timeout: float = 30.0
    concurrency: int = 1

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            steam_api_key=os.getenv("STEAM_API_KEY") or None,
            cache_dir=os.getenv("STEAMSCRAPE_CACHE_DIR", cls.cache_dir),
            store_origin=os.getenv("STEAMSCRAPE_STORE_ORIGIN", cls.store_origin),
            api_base=os.getenv("STEAMSCRAPE_API_BASE", cls.api_base),
            http_timeout=float(os.getenv("STEAMSCRAPE_TIMEOUT", "30")),
            concurrency=int(os.getenv("STEAMSCRAPE_CONCURRENCY", "1")),
        )

    def require_api_key(self) -> str:
        """Return the Steam Web API key or fail before any work is done."""
        if not self.steam_api_key:
            raise ScrapeError(
                ErrorKind.CONFIGURATION,
                "No steam api key provided. "
                "Set one in the STEAM_API_KEY environment variable.",
            )
        return self.steam_api_key
