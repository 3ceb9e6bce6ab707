"""steamscrape — Steam store page scraper with an on-disk cache."""

from steamscrape.cache import CacheStore
from steamscrape.config import Config
from steamscrape.errors import ErrorKind, ScrapeError
from steamscrape.models import ImageDownload, ItemOutcome, Page
from steamscrape.pipeline import ItemPipeline, app_id_from_url, run_many
from steamscrape.steamapi import SteamApi

__all__ = [
    "CacheStore",
    "Config",
    "ErrorKind",
    "ImageDownload",
    "ItemOutcome",
    "ItemPipeline",
    "Page",
    "ScrapeError",
    "SteamApi",
    "app_id_from_url",
    "run_many",
]
