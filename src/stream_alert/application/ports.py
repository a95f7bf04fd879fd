from __future__ import annotations

from typing import Awaitable, Callable, Protocol, TypeVar

from stream_alert.domain.events import DomainEvent
from stream_alert.domain.models import FetchedState, FetchResult, StreamerState

E = TypeVar("E", bound=DomainEvent)

Handler = Callable[[E], Awaitable[None]]


class EventBus(Protocol):
    async def publish(self, *events: DomainEvent) -> None: ...
    def subscribe(self, event_type: type[DomainEvent], handler: Handler[E]) -> None: ...


class StatusClientProtocol(Protocol):
    async def fetch(self) -> FetchResult: ...  # pragma: no cover


class StateStoreProtocol(Protocol):
    """Persistence for the last observed streamer record."""

    def load(self) -> StreamerState | None:
        """Return the stored record, or ``None`` when nothing is stored."""
        ...  # pragma: no cover

    def persist(self, state: FetchedState) -> None:
        """Replace the stored record with *state*."""
        ...  # pragma: no cover


class NotifierProtocol(Protocol):
    async def notify_about_broadcast(
        self, state: FetchedState
    ) -> None: ...  # pragma: no cover
