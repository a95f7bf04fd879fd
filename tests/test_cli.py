from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Iterator

import pytest
from loguru import logger
from typer.testing import CliRunner

from stream_alert import cli
from stream_alert.application.watcher import Watcher
from stream_alert.config import Settings
from stream_alert.domain.models import (
    FetchedState,
    FetchFailed,
    FetchResult,
    Offline,
    Online,
    StreamerState,
)
from stream_alert.infrastructure.lock import SingletonLock
from stream_alert.infrastructure.status_client import HttpStatusClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")


@pytest.fixture
def data_dir(fake_env: Path) -> Path:
    path = fake_env / "data"
    path.mkdir()
    return path


def patch_fetch(monkeypatch: pytest.MonkeyPatch, *results: FetchResult) -> None:
    queue = list(results)

    async def fake_fetch(self: HttpStatusClient) -> FetchResult:
        return queue.pop(0)

    monkeypatch.setattr(HttpStatusClient, "fetch", fake_fetch)


def test_format_state() -> None:
    assert cli.format_state(None) == (
        "user_id: absent\nbroadcast_count: absent\nbroadcast_id: absent"
    )
    assert cli.format_state(
        StreamerState(user_id="42", broadcast_count=5)
    ) == "user_id: 42\nbroadcast_count: 5\nbroadcast_id: absent"


def test_bootstrap_creates_dirs_and_log_file(settings: Settings) -> None:
    cli.bootstrap(settings, log_to_file=True)
    logger.info("hello")
    assert settings.data_dir.is_dir()
    assert settings.config_dir.is_dir()
    assert settings.log_file.exists()


def test_state_show_empty(fake_env: Path) -> None:
    result = runner.invoke(cli.app, ["state", "show"])
    assert result.exit_code == 0
    assert "user_id: absent" in result.stdout


def test_state_show_existing(data_dir: Path) -> None:
    (data_dir / "state").write_text("42\n5\n100\n", encoding="utf-8")
    result = runner.invoke(cli.app, ["state", "show"])
    assert result.exit_code == 0
    assert "user_id: 42" in result.stdout
    assert "broadcast_count: 5" in result.stdout
    assert "broadcast_id: 100" in result.stdout


def test_state_clear(data_dir: Path) -> None:
    state = data_dir / "state"
    state.write_text("42\n5\n100\n", encoding="utf-8")
    result = runner.invoke(cli.app, ["state", "clear"])
    assert result.exit_code == 0
    assert state.read_text(encoding="utf-8") == ""


def test_state_clear_refuses_while_running(data_dir: Path) -> None:
    state = data_dir / "state"
    state.write_text("42\n5\n100\n", encoding="utf-8")
    with SingletonLock(data_dir / "lock"):
        result = runner.invoke(cli.app, ["state", "clear"])
    assert result.exit_code == 1
    assert state.read_text(encoding="utf-8") == "42\n5\n100\n"


def test_missing_configuration_exits_2(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STREAM_ALERT_STATUS_URL", raising=False)
    result = runner.invoke(cli.app, ["state", "show"])
    assert result.exit_code == 2


def test_check_online(fake_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    patch_fetch(
        monkeypatch,
        Online(state=FetchedState(user_id="7", broadcast_count=1, broadcast_id="55")),
    )
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 0
    assert "online" in result.stdout
    assert "broadcast_id: 55" in result.stdout
    assert not (fake_env / "data" / "state").exists()


def test_check_offline(fake_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    patch_fetch(monkeypatch, Offline())
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 0
    assert "offline" in result.stdout


def test_check_failure(fake_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    patch_fetch(monkeypatch, FetchFailed(reason="request failed"))
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 1


def test_watch_without_sounds_is_fatal(fake_env: Path) -> None:
    result = runner.invoke(cli.app, ["watch"])
    assert result.exit_code == 1


def test_watch_stops_on_time_travel(
    data_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    state = data_dir / "state"
    state.write_text("42\n6\n101\n", encoding="utf-8")
    patch_fetch(
        monkeypatch,
        Online(state=FetchedState(user_id="42", broadcast_count=5, broadcast_id="100")),
    )
    result = runner.invoke(cli.app, ["watch", "--silent", "--interval", "0"])
    assert result.exit_code == 1
    assert state.read_text(encoding="utf-8") == "42\n6\n101\n"
    log = (data_dir / "stream-alert.log").read_text(encoding="utf-8")
    assert "went backwards: 6 -> 5" in log


def test_watch_alerts_then_persists(
    data_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    state = data_dir / "state"
    patch_fetch(
        monkeypatch,
        Online(state=FetchedState(user_id="7", broadcast_count=1, broadcast_id="55")),
        Offline(),
        Online(state=FetchedState(user_id="7", broadcast_count=0, broadcast_id="1")),
    )
    result = runner.invoke(cli.app, ["watch", "--silent", "--interval", "0"])
    assert result.exit_code == 1
    assert state.read_text(encoding="utf-8") == "7\n1\n55\n"
    log = (data_dir / "stream-alert.log").read_text(encoding="utf-8")
    assert "New broadcast 55 of user 7" in log
    assert "Streamer is offline" in log


def test_watch_passes_interval(
    fake_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: list[float] = []

    async def fake_watch(self: Watcher, interval: float, stop: asyncio.Event) -> None:
        seen.append(interval)

    monkeypatch.setattr(Watcher, "watch", fake_watch)
    result = runner.invoke(cli.app, ["watch", "--silent", "--interval", "2.5"])
    assert result.exit_code == 0
    assert seen == [2.5]
    with SingletonLock(fake_env / "data" / "lock") as lock:
        assert lock.locked
