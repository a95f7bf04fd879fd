from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, Awaitable, Iterator

from aiolimiter import AsyncLimiter
from dependency_injector import containers, providers

from stream_alert.application.event_handlers import register_alert_handlers
from stream_alert.application.ports import EventBus, NotifierProtocol
from stream_alert.infrastructure.event_bus import InMemoryEventBus
from stream_alert.infrastructure.error import InfraError
from stream_alert.infrastructure.lock import SingletonLock
from stream_alert.infrastructure.notifier.audio import AudioNotifier
from stream_alert.infrastructure.notifier.console import ConsoleNotifier
from stream_alert.infrastructure.resources import (
    load_alert_sounds,
    load_audio_devices,
)
from stream_alert.infrastructure.state_file import FileStateStore
from stream_alert.infrastructure.status_client import HttpStatusClient

from .application.watcher import Watcher
from .config import Settings

# ---------- low-level resources ----------


def _lock_resource(path: Path) -> Iterator[SingletonLock]:
    lock = SingletonLock(path)
    lock.acquire()
    try:
        yield lock
    finally:
        lock.release()


def _state_store_resource(path: Path, lock: SingletonLock) -> Iterator[FileStateStore]:
    if not lock.locked:
        raise InfraError(
            f"State file {path} opened without the instance lock",
            code="INFRA_LOCK_NOT_HELD",
            context={"path": str(path)},
        )
    store = FileStateStore(path)
    try:
        yield store
    finally:
        store.close()


async def _status_client_resource(
    url: str,
    status_field: str,
    online_status: str,
    user_id_field: str,
    broadcast_count_field: str,
    broadcast_id_field: str,
    timeout: float,
    async_limiter: AsyncLimiter | None = None,
) -> AsyncIterator[HttpStatusClient]:
    client = HttpStatusClient(
        url,
        status_field=status_field,
        online_status=online_status,
        user_id_field=user_id_field,
        broadcast_count_field=broadcast_count_field,
        broadcast_id_field=broadcast_id_field,
        timeout=timeout,
        async_limiter=async_limiter,
    )
    try:
        yield client
    finally:
        await client.aclose()


def _build_event_bus(notifier: NotifierProtocol) -> EventBus:
    bus = InMemoryEventBus()
    register_alert_handlers(bus, notifier)
    return bus


# ---------- DI container ----------
class AppContainer(containers.DeclarativeContainer):
    """Dependency Injector container for the app."""

    settings = providers.Singleton(Settings)
    container_config = providers.Configuration()

    # Process-wide lock and the state file it guards
    instance_lock = providers.Resource(
        _lock_resource, path=settings.provided.lock_file
    )
    state_store = providers.Resource(
        _state_store_resource, path=settings.provided.state_file, lock=instance_lock
    )
    # Read-only access that does not take the lock
    state_reader = providers.Factory(FileStateStore, path=settings.provided.state_file)

    # Remote status
    async_limiter = providers.Factory(
        AsyncLimiter,
        container_config.limiter_max_rate,
        container_config.limiter_time_period,
    )
    status_client = providers.Resource(
        _status_client_resource,
        url=container_config.status_url,
        status_field=container_config.status_field,
        online_status=container_config.online_status,
        user_id_field=container_config.user_id_field,
        broadcast_count_field=container_config.broadcast_count_field,
        broadcast_id_field=container_config.broadcast_id_field,
        timeout=container_config.http_timeout.as_float(),
        async_limiter=async_limiter,
    )

    # Alerts
    audio_devices = providers.Singleton(
        load_audio_devices, settings.provided.devices_file
    )
    alert_sounds = providers.Singleton(load_alert_sounds, settings.provided.sounds_file)
    audio_notifier = providers.Singleton(
        AudioNotifier,
        devices=audio_devices,
        sounds=alert_sounds,
        player_command=container_config.player_command,
        device_flag=container_config.player_device_flag,
        repeats=container_config.alert_repeats.as_int(),
        pause=container_config.alert_pause.as_float(),
    )
    console_notifier = providers.Singleton(ConsoleNotifier)
    notifier: providers.Selector[NotifierProtocol] = providers.Selector(
        container_config.notifier,
        audio=audio_notifier,
        console=console_notifier,
    )
    event_bus = providers.Singleton(_build_event_bus, notifier=notifier)

    # Application actors
    watcher = providers.Factory(
        Watcher,
        status=status_client,
        state_store=state_store,
        event_bus=event_bus,
    )


# ---------- bootstrap helpers ----------


def build_container(settings: Settings) -> AppContainer:
    """Create the container for *settings*; resources start lazily."""
    container = AppContainer()
    container.settings.override(providers.Object(settings))
    container.container_config.from_pydantic(settings)  # pyright: ignore
    return container


async def shutdown_container(container: AppContainer) -> None:
    """Release the lock, the state file and the HTTP client."""
    aw = container.shutdown_resources()
    if isinstance(aw, Awaitable):
        await aw
