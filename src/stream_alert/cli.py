from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import typer
from dependency_injector.wiring import Provide, inject
from loguru import logger
from pydantic import ValidationError

from stream_alert.application.ports import StatusClientProtocol
from stream_alert.application.watcher import Watcher
from stream_alert.domain.models import Offline, Online, StreamerState
from stream_alert.errors import AppError
from stream_alert.infrastructure.error import InfraError
from stream_alert.infrastructure.error_utils import log_and_wrap
from stream_alert.infrastructure.log_setup import configure_logging
from stream_alert.infrastructure.notifier.audio import AudioNotifier
from stream_alert.infrastructure.resources import ensure_dirs
from stream_alert.infrastructure.state_file import FileStateStore

from .config import Settings
from .container import AppContainer, build_container, shutdown_container

app = typer.Typer(
    name="stream-alert",
    help="Poll a streamer's live status and play an audio alert on every new broadcast",
)
state_app = typer.Typer(help="Inspect the persisted streamer state")
app.add_typer(state_app, name="state")


def bootstrap(settings: Settings, *, log_to_file: bool = False) -> None:
    """Create the data/config directories and configure logging."""
    ensure_dirs([settings.data_dir, settings.config_dir])
    configure_logging(
        settings.log_level,
        settings.log_file if log_to_file else None,
        settings.log_rotation,
    )


async def entry_point(settings: Settings, func: Callable[[], Awaitable[int]]) -> int:
    container = build_container(settings)
    container.wire(modules=[__name__])
    try:
        return await func()
    except AppError:
        raise
    except Exception as exc:
        log_and_wrap(exc, InfraError, logger, context={"reason": "unexpected"})
        raise
    finally:
        await shutdown_container(container)
        container.unwire()


def run(
    func: Callable[[], Awaitable[int]], *, log_to_file: bool = False, **overrides: Any
) -> int:
    """Build settings, bootstrap and run *func*; fatal errors exit with 1."""
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        typer.echo(f"Invalid configuration:\n{exc}", err=True)
        raise typer.Exit(2) from exc
    try:
        bootstrap(settings, log_to_file=log_to_file)
        return asyncio.run(entry_point(settings, func))
    except AppError as exc:
        logger.opt(exception=exc).critical("Fatal error {}", exc.describe())
        raise typer.Exit(1) from exc


def format_state(state: StreamerState | None) -> str:
    state = state or StreamerState()
    rows = (
        ("user_id", state.user_id),
        ("broadcast_count", state.broadcast_count),
        ("broadcast_id", state.broadcast_id),
    )
    return "\n".join(
        f"{name}: {'absent' if value is None else value}" for name, value in rows
    )


@inject
async def _watch(
    stop: asyncio.Event,
    settings: Settings = Provide[AppContainer.settings],
    watcher: Watcher = Provide[AppContainer.watcher],
) -> int:
    await watcher.watch(settings.interval, stop)
    return 0


@inject
async def _check(
    client: StatusClientProtocol = Provide[AppContainer.status_client],
) -> int:
    result = await client.fetch()
    if isinstance(result, Online):
        typer.echo("online")
        typer.echo(format_state(result.state.as_streamer_state()))
        return 0
    if isinstance(result, Offline):
        typer.echo("offline")
        return 0
    typer.echo(f"error: {result.reason}", err=True)
    return 1


@inject
async def _state_show(
    reader: FileStateStore = Provide[AppContainer.state_reader],
) -> int:
    with reader as store:
        typer.echo(format_state(store.load()))
    return 0


@inject
async def _state_clear(
    store: FileStateStore = Provide[AppContainer.state_store],
) -> int:
    store.clear()
    typer.echo("State cleared")
    return 0


@inject
async def _test_alert(
    notifier: AudioNotifier = Provide[AppContainer.audio_notifier],
) -> int:
    await notifier.play_pass()
    return 0


@app.command("watch", help="Poll the status endpoint forever and alert on new broadcasts")
def watch(
    interval: float | None = typer.Option(
        None, "--interval", help="Poll interval, seconds (default: 9)"
    ),
    silent: bool = typer.Option(
        False, "--silent", help="Log alerts instead of playing sounds"
    ),
) -> None:
    stop = asyncio.Event()
    code = run(
        lambda: _watch(stop),
        log_to_file=True,
        interval=interval,
        notifier="console" if silent else None,
    )
    raise typer.Exit(code)


@app.command("check", help="Fetch the status once and print it")
def check() -> None:
    raise typer.Exit(run(_check))


@app.command("test-alert", help="Play every alert sound on every device once")
def test_alert() -> None:
    raise typer.Exit(run(_test_alert))


@state_app.command("show", help="Print the persisted streamer state")
def state_show() -> None:
    raise typer.Exit(run(_state_show))


@state_app.command("clear", help="Forget the persisted state; the next live poll alerts")
def state_clear() -> None:
    raise typer.Exit(run(_state_clear))


@app.callback()
def root() -> None:
    """Root command for stream-alert."""


def main() -> None:  # pragma: no cover - CLI entry point
    """Entrypoint for the CLI."""
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
