"""Steam Web API client: vanity name resolution and owned games."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from steamscrape.config import Config
from steamscrape.errors import ErrorKind, ScrapeError
from steamscrape.utils.http import fetch_json

logger = logging.getLogger(__name__)

RESOLVE_VANITY_PATH = "ISteamUser/ResolveVanityURL/v0001/"
OWNED_GAMES_PATH = "IPlayerService/GetOwnedGames/v0001/"


class SteamApi:
    """Thin wrapper around the two Web API calls used to list a user's library."""

    def __init__(
        self,
        key: str,
        *,
        client: httpx.AsyncClient | None = None,
        base_url: str = "https://api.steampowered.com",
        timeout: float = 30.0,
    ) -> None:
        self.key = key
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(
        cls, config: Config, client: httpx.AsyncClient | None = None
    ) -> SteamApi:
        return cls(
            config.require_api_key(),
            client=client,
            base_url=config.api_base,
            timeout=config.http_timeout,
        )

    async def _call(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        """Call a Web API method and return its ``response`` object."""
        url = f"{self.base_url}/{path}"
        try:
            data = await fetch_json(
                url,
                client=self.client,
                params={**params, "key": self.key},
                timeout=self.timeout,
            )
        except ScrapeError as exc:
            raise ScrapeError(
                ErrorKind.LOOKUP, "Steam API request failed", cause=exc
            ) from exc
        except ValueError as exc:
            raise ScrapeError(
                ErrorKind.LOOKUP, "Steam API returned malformed JSON", cause=exc
            ) from exc
        response = data.get("response") if isinstance(data, dict) else None
        if not isinstance(response, dict):
            raise ScrapeError(ErrorKind.LOOKUP, "Steam API returned an invalid response")
        return response

    async def resolve_vanity_url(self, username: str) -> str:
        """Resolve a profile vanity name to a 64-bit steamid string."""
        data = await self._call(RESOLVE_VANITY_PATH, {"vanityurl": username})
        steamid = data.get("steamid")
        if not isinstance(steamid, str):
            raise ScrapeError(
                ErrorKind.LOOKUP, f"Couldn't find steamid for {username}"
            )
        return steamid

    async def get_owned_games(self, steamid: str) -> list[int]:
        data = await self._call(
            OWNED_GAMES_PATH, {"steamid": steamid, "format": "json"}
        )
        games = data.get("games")
        if not isinstance(games, list):
            raise ScrapeError(ErrorKind.LOOKUP, "Steam API returned an invalid response")

        app_ids: list[int] = []
        for game in games:
            appid = game.get("appid") if isinstance(game, dict) else None
            # bool is an int subclass
            if isinstance(appid, int) and not isinstance(appid, bool) and appid >= 0:
                app_ids.append(appid)
            else:
                logger.debug("Skipping owned game entry without appid: %r", game)
        logger.info("Found %d owned games for %s", len(app_ids), steamid)
        return app_ids
