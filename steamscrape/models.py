"""Core data models for steamscrape."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from steamscrape.errors import ScrapeError


class ImageDownload(BaseModel, frozen=True):
    """Outcome of one cache-aware image download."""

    url: str
    path: Path | None = None
    status: Literal["downloaded", "cached", "failed"]
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


class Page(BaseModel, frozen=True):
    """Everything scraped for one store item."""

    app_id: int = Field(ge=0, lt=2**64)
    cache_path: Path
    props: dict[str, str] = Field(default_factory=dict)
    screenshots: tuple[str, ...] = ()
    images: tuple[ImageDownload, ...] = ()

    @property
    def failed_images(self) -> list[ImageDownload]:
        return [image for image in self.images if not image.ok]


class ItemOutcome(BaseModel, frozen=True, arbitrary_types_allowed=True):
    """Per-item result of a batch run: either a page or the error that stopped it."""

    app_id: int
    page: Page | None = None
    error: ScrapeError | None = None

    @property
    def ok(self) -> bool:
        return self.page is not None
