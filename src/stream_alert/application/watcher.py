from __future__ import annotations

import asyncio

from loguru import logger

from stream_alert.application.error import WatcherRunError
from stream_alert.domain.events import (
    BroadcastStarted,
    CycleCompleted,
    CycleFailed,
    CycleSkipped,
)
from stream_alert.domain.models import AlertDecision, FetchFailed, Offline
from stream_alert.domain.transitions import decide, record_changed

from .ports import EventBus, StateStoreProtocol, StatusClientProtocol


class Watcher:
    """Poll the status endpoint and announce new broadcasts."""

    def __init__(
        self,
        status: StatusClientProtocol,
        state_store: StateStoreProtocol,
        event_bus: EventBus,
    ) -> None:
        self.status = status
        self.state_store = state_store
        self.event_bus = event_bus

    async def run_once(self) -> AlertDecision | None:
        """Run one poll cycle.

        Returns the decision, or ``None`` when the cycle was skipped.
        """

        result = await self.status.fetch()
        if isinstance(result, Offline):
            logger.info("Streamer is offline, skipping cycle")
            await self.event_bus.publish(CycleSkipped(reason="offline"))
            return None
        if isinstance(result, FetchFailed):
            logger.warning("Status fetch failed: {}", result.reason)
            await self.event_bus.publish(CycleSkipped(reason=result.reason))
            return None

        new = result.state
        old = self.state_store.load()
        decision = decide(old, new)
        if record_changed(old, new):
            logger.info("State changed: {} -> {}", old, new)
        else:
            logger.debug("Neither user id nor broadcast count changed")
        self.state_store.persist(new)

        if decision.should_alert():
            logger.info(
                "New broadcast {} of user {} (#{})",
                new.broadcast_id,
                new.user_id,
                new.broadcast_count,
            )
            await self.event_bus.publish(BroadcastStarted(state=new))
        await self.event_bus.publish(CycleCompleted(state=new, decision=decision))
        return decision

    async def watch(self, interval: float, stop_event: asyncio.Event) -> None:
        """Run cycles every *interval* seconds until *stop_event* is set."""

        logger.info("Watching stream status every {}s", interval)
        while not stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                logger.opt(exception=e).exception("Run once failed")
                await self.event_bus.publish(CycleFailed(error=str(e)))
                raise WatcherRunError(error=e) from e
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except TimeoutError:
                pass
