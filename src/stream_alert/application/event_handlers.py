"""Application-level event handler registration."""

from __future__ import annotations

from loguru import logger

from stream_alert.application.ports import EventBus, NotifierProtocol
from stream_alert.domain.events import (
    BroadcastStarted,
    CycleCompleted,
    CycleFailed,
    CycleSkipped,
)


def register_alert_handlers(event_bus: EventBus, notifier: NotifierProtocol) -> None:
    """Register the alert and logging handlers on *event_bus*."""

    async def alert_about_broadcast(event: BroadcastStarted) -> None:
        await notifier.notify_about_broadcast(event.state)

    async def log_cycle_completed(event: CycleCompleted) -> None:
        logger.debug(
            f"cycle completed: user={event.state.user_id} "
            f"count={event.state.broadcast_count} decision={event.decision.value}"
        )

    async def log_cycle_skipped(event: CycleSkipped) -> None:
        logger.debug(f"cycle skipped: {event.reason}")

    async def log_cycle_failed(event: CycleFailed) -> None:
        logger.debug(f"cycle failed: {event.error}")

    event_bus.subscribe(BroadcastStarted, alert_about_broadcast)
    event_bus.subscribe(CycleCompleted, log_cycle_completed)
    event_bus.subscribe(CycleSkipped, log_cycle_skipped)
    event_bus.subscribe(CycleFailed, log_cycle_failed)
