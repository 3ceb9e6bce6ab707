"""Fetch, extract and cache one store item at a time."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import AsyncIterator, Iterable
from urllib.parse import urlparse

import httpx

from steamscrape.cache import CacheStore
from steamscrape.config import Config
from steamscrape.errors import ErrorKind, ScrapeError
from steamscrape.extractor import (
    extract_props,
    extract_screenshots,
    fullsize_url,
    parse_document,
)
from steamscrape.models import ImageDownload, ItemOutcome, Page
from steamscrape.utils.http import fetch

logger = logging.getLogger(__name__)

STORE_URL_TEMPLATE = "{origin}/app/{app_id}/"

# Get past the store's age gate without an interactive confirmation.
AGE_GATE_COOKIES = {"birthtime": "400000000", "mature_content": "1"}

_APP_ID_RE = re.compile(r"[0-9]+")
_MAX_APP_ID = 2**64 - 1


def app_id_from_url(url: str) -> int:
    """Return the item id of a ``/app/<id>/...`` store URL."""
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise ScrapeError(
            ErrorKind.LOCATOR, f"Invalid Steam game URL: {url!r}", cause=exc
        ) from exc
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ScrapeError(ErrorKind.LOCATOR, f"Invalid Steam game URL: {url!r}")

    segments = parsed.path.split("/")[1:]
    if not segments or segments[0] != "app":
        raise ScrapeError(ErrorKind.LOCATOR, f"Invalid Steam game URL: {url!r}")
    if len(segments) < 2 or not _APP_ID_RE.fullmatch(segments[1]):
        raise ScrapeError(ErrorKind.LOCATOR, f"Invalid Steam game URL: {url!r}")

    app_id = int(segments[1])
    if app_id > _MAX_APP_ID:
        raise ScrapeError(ErrorKind.LOCATOR, f"App id out of range in {url!r}")
    return app_id


class ItemPipeline:
    """Scrape a store detail page and download the images it references."""

    def __init__(
        self,
        cache: CacheStore,
        *,
        client: httpx.AsyncClient | None = None,
        store_origin: str = "http://store.steampowered.com",
        timeout: float = 30.0,
        force_images: bool = False,
    ) -> None:
        self.cache = cache
        self.client = client
        self.store_origin = store_origin.rstrip("/")
        self.timeout = timeout
        self.force_images = force_images

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: httpx.AsyncClient | None = None,
        *,
        force_images: bool = False,
    ) -> ItemPipeline:
        return cls(
            CacheStore(config.cache_dir),
            client=client,
            store_origin=config.store_origin,
            timeout=config.http_timeout,
            force_images=force_images,
        )

    def store_url(self, app_id: int) -> str:
        return STORE_URL_TEMPLATE.format(origin=self.store_origin, app_id=app_id)

    async def scrape(self, app_id: int) -> Page:
        return await self.scrape_url(self.store_url(app_id))

    async def scrape_url(self, url: str) -> Page:
        app_id = app_id_from_url(url)
        body = await self._fetch_page(url, app_id)

        doc = parse_document(body)
        props = extract_props(doc)
        screenshots = extract_screenshots(doc)
        logger.debug(
            "App %d: %d properties, %d screenshots", app_id, len(props), len(screenshots)
        )

        images = await self.fetch_images(app_id, self.image_urls(props, screenshots))
        return Page(
            app_id=app_id,
            cache_path=self.cache.item_dir(app_id),
            props=props,
            screenshots=tuple(screenshots),
            images=tuple(images),
        )

    async def _fetch_page(self, url: str, app_id: int) -> bytes:
        """Return the page body, from the cache when it has been fetched before."""
        path = self.cache.page_path(app_id)
        cached = self.cache.read(path)
        if cached is not None:
            logger.info("Found page in cache: %s", path)
            return cached

        logger.info("Fetching url %s", url)
        resp = await fetch(
            url, client=self.client, cookies=AGE_GATE_COOKIES, timeout=self.timeout
        )
        body = resp.content
        self.cache.store(path, body)
        return body

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    @staticmethod
    def image_urls(props: dict[str, str], screenshots: Iterable[str]) -> list[str]:
        """The header image followed by every screenshot at full size."""
        urls: list[str] = []
        if props.get("image"):
            urls.append(props["image"])
        urls.extend(fullsize_url(src) for src in screenshots)
        return urls

    async def fetch_images(self, app_id: int, urls: Iterable[str]) -> list[ImageDownload]:
        return [await self.download_image(app_id, url) for url in urls]

    async def download_image(
        self, app_id: int, url: str, *, force: bool | None = None
    ) -> ImageDownload:
        """Download *url* into the item's cache directory unless it is already there.

        Failures are logged and reported in the result, never raised.
        """
        if force is None:
            force = self.force_images
        try:
            path = self.cache.image_path(app_id, url)
        except ScrapeError as exc:
            logger.warning("Skipping image for app %d: %s", app_id, exc)
            return ImageDownload(url=url, status="failed", error=str(exc))

        if not force and path.exists():
            logger.debug("Image already cached: %s", path)
            return ImageDownload(url=url, path=path, status="cached")

        logger.info("Fetching URL %s", url)
        try:
            resp = await fetch(url, client=self.client, timeout=self.timeout)
        except ScrapeError as exc:
            logger.warning("Couldn't download image for app %d: %s", app_id, exc)
            return ImageDownload(url=url, path=path, status="failed", error=str(exc))

        if not self.cache.store(path, resp.content):
            return ImageDownload(
                url=url, path=path, status="failed", error=f"couldn't write {path}"
            )
        return ImageDownload(url=url, path=path, status="downloaded")


async def run_many(
    pipeline: ItemPipeline,
    app_ids: Iterable[int],
    *,
    concurrency: int = 1,
) -> AsyncIterator[ItemOutcome]:
    """Scrape every id, yielding one outcome per id as each finishes.

    A failing item never stops the others. With ``concurrency=1`` items are
    processed strictly one after another, in order.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _one(app_id: int) -> ItemOutcome:
        async with semaphore:
            try:
                page = await pipeline.scrape(app_id)
            except ScrapeError as exc:
                logger.error("Failed to scrape app %d: %s", app_id, exc)
                return ItemOutcome(app_id=app_id, error=exc)
            return ItemOutcome(app_id=app_id, page=page)

    tasks = [asyncio.ensure_future(_one(app_id)) for app_id in app_ids]
    try:
        for coro in asyncio.as_completed(tasks):
            yield await coro
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
