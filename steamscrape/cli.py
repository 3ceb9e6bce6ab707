"""CLI entry point for steamscrape."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace

import click
from dotenv import find_dotenv, load_dotenv

from steamscrape.config import Config
from steamscrape.errors import ScrapeError
from steamscrape.models import ItemOutcome
from steamscrape.pipeline import ItemPipeline, run_many
from steamscrape.steamapi import SteamApi
from steamscrape.utils.http import new_client

logger = logging.getLogger(__name__)

_APP_ID = click.IntRange(min=0, max=2**64 - 1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _echo_outcome(outcome: ItemOutcome) -> None:
    page = outcome.page
    if page is None:
        click.echo(f"  ✗ App {outcome.app_id}: {outcome.error}", err=True)
        return

    click.echo(f"\n=== App {page.app_id} ({page.cache_path}) ===")
    for key, value in sorted(page.props.items()):
        click.echo(f"  {key}: {' '.join(value.split())}")
    click.echo(f"  screenshots: {len(page.screenshots)}")
    for image in page.images:
        mark = "✗" if image.status == "failed" else "✓"
        detail = f" ({image.error})" if image.error else ""
        click.echo(f"  {mark} [{image.status}] {image.url}{detail}")


async def _run(
    user: str | None,
    gameids: tuple[int, ...],
    config: Config,
    force_images: bool,
) -> list[ItemOutcome]:
    async with new_client(config.http_timeout) as client:
        if user:
            api = SteamApi.from_config(config, client)
            steamid = await api.resolve_vanity_url(user)
            click.echo(f"Resolved vanity name to: {steamid}")
            app_ids = await api.get_owned_games(steamid)
        else:
            app_ids = list(gameids)

        click.echo(f"steamscrape — scraping {len(app_ids)} app(s)...")
        pipeline = ItemPipeline.from_config(config, client, force_images=force_images)
        outcomes: list[ItemOutcome] = []
        async for outcome in run_many(pipeline, app_ids, concurrency=config.concurrency):
            _echo_outcome(outcome)
            outcomes.append(outcome)
        return outcomes


@click.command()
@click.option("--user", "-u", default=None, help="Scrape this user's whole library")
@click.option(
    "--gameid",
    "-g",
    "gameids",
    multiple=True,
    type=_APP_ID,
    help="Scrape the steam page for the game with this id",
)
@click.option("--cache-dir", default=None, help="Cache root directory")
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Apps scraped at once")
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds")
@click.option("--force-images", is_flag=True, help="Download images even if already cached")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    user: str | None,
    gameids: tuple[int, ...],
    cache_dir: str | None,
    concurrency: int | None,
    timeout: float | None,
    force_images: bool,
    verbose: bool,
) -> None:
    """steamscrape — Steam store web scraper."""
    load_dotenv(find_dotenv(usecwd=True))
    _setup_logging(verbose)

    if bool(user) == bool(gameids):
        raise click.UsageError("Pass exactly one of --user or --gameid.")

    config = Config.from_env()
    overrides: dict[str, object] = {}
    if cache_dir:
        overrides["cache_dir"] = cache_dir
    if concurrency:
        overrides["concurrency"] = concurrency
    if timeout:
        overrides["http_timeout"] = timeout
    if overrides:
        config = replace(config, **overrides)

    try:
        if user:
            config.require_api_key()
        outcomes = asyncio.run(_run(user, gameids, config, force_images))
    except ScrapeError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    failed = [o for o in outcomes if not o.ok]
    if failed:
        click.echo(f"\n{len(failed)} of {len(outcomes)} app(s) failed.", err=True)
    if outcomes and len(failed) == len(outcomes):
        sys.exit(1)


if __name__ == "__main__":
    main()
