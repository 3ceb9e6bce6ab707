"""Tests for the CLI entry point."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from steamscrape.cli import main

from conftest import FakeSteam

_API = "https://api.steampowered.com"
_STORE = "http://store.steampowered.com"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def patched_client(steam: FakeSteam, monkeypatch: pytest.MonkeyPatch) -> FakeSteam:
    monkeypatch.setattr("steamscrape.cli.new_client", lambda timeout: steam.client())
    return steam


def test_no_input_mode_is_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(main, [])
    assert result.exit_code == 2
    assert "exactly one of --user or --gameid" in result.output


def test_both_input_modes_is_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--user", "gaben", "--gameid", "620"])
    assert result.exit_code == 2


def test_non_numeric_gameid(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--gameid", "portal"])
    assert result.exit_code == 2


def test_user_without_api_key(
    runner: CliRunner,
    patched_client: FakeSteam,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(main, ["--user", "gaben"])
    assert result.exit_code == 1
    assert "STEAM_API_KEY" in result.output
    assert patched_client.requests == []


def test_gameids(runner: CliRunner, patched_client: FakeSteam, tmp_path: Path) -> None:
    patched_client.add(
        f"{_STORE}/app/620/",
        httpx.Response(200, content=b'<span itemprop="name">Portal 2</span>'),
    )

    result = runner.invoke(main, ["-g", "620", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "=== App 620" in result.output
    assert "name: Portal 2" in result.output
    assert (tmp_path / "620" / "index.html").exists()


def test_partial_failure_still_succeeds(
    runner: CliRunner, patched_client: FakeSteam, tmp_path: Path
) -> None:
    patched_client.add(f"{_STORE}/app/1/", httpx.Response(200, content=b"<p></p>"))

    result = runner.invoke(main, ["-g", "1", "-g", "2", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "App 2" in result.output
    assert "1 of 2 app(s) failed" in result.output


def test_all_items_failed(
    runner: CliRunner, patched_client: FakeSteam, tmp_path: Path
) -> None:
    result = runner.invoke(main, ["-g", "2", "--cache-dir", str(tmp_path)])
    assert result.exit_code == 1


def test_user_library(
    runner: CliRunner,
    patched_client: FakeSteam,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("STEAM_API_KEY", "secret")
    patched_client.add(
        f"{_API}/ISteamUser/ResolveVanityURL/v0001/",
        httpx.Response(200, json={"response": {"steamid": "7656", "success": 1}}),
    )
    patched_client.add(
        f"{_API}/IPlayerService/GetOwnedGames/v0001/",
        httpx.Response(200, json={"response": {"games": [{"appid": 620}]}}),
    )
    patched_client.add(
        f"{_STORE}/app/620/",
        httpx.Response(200, content=b'<span itemprop="name">Portal 2</span>'),
    )

    result = runner.invoke(main, ["--user", "gaben", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Resolved vanity name to: 7656" in result.output
    assert "name: Portal 2" in result.output


def test_lookup_failure_exits_nonzero(
    runner: CliRunner,
    patched_client: FakeSteam,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("STEAM_API_KEY", "secret")

    result = runner.invoke(main, ["--user", "nobody", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "lookup error" in result.output
    assert not any(tmp_path.iterdir())
