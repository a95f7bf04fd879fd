from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, DefaultDict, TypeVar, cast

from loguru import logger
from typing_extensions import override

from stream_alert.application.ports import EventBus, Handler
from stream_alert.domain.events import DomainEvent

T = TypeVar("T", bound=DomainEvent)


@dataclass(frozen=True, slots=True, kw_only=True)
class InMemoryEventBus(EventBus):
    """Dispatch events to in-process handlers; handler errors propagate.

    Handlers of the event's own class run first, then those subscribed to
    its base classes, each group in subscription order.
    """

    handlers: DefaultDict[type[DomainEvent], list[Handler[Any]]] = field(
        default_factory=lambda: defaultdict(list)
    )

    def handlers_for(self, event: DomainEvent) -> list[Handler[Any]]:
        found: list[Handler[Any]] = []
        for event_type in type(event).__mro__:
            found.extend(self.handlers.get(event_type, ()))
        return found

    @override
    async def publish(self, *events: DomainEvent) -> None:
        for event in events:
            handlers = self.handlers_for(event)
            if not handlers:
                logger.trace("No handlers for {}", event.name())
            for handler in handlers:
                await handler(cast(Any, event))

    @override
    def subscribe(self, event_type: type[T], handler: Handler[T]) -> None:
        self.handlers[event_type].append(handler)
