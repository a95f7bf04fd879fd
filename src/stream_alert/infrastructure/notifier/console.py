from __future__ import annotations

from loguru import logger

from stream_alert.application.ports import NotifierProtocol
from stream_alert.domain.models import FetchedState


class ConsoleNotifier(NotifierProtocol):
    """Log alerts instead of playing them."""

    async def notify_about_broadcast(self, state: FetchedState) -> None:
        logger.info(
            "🔔 New broadcast {} of user {} (#{})",
            state.broadcast_id,
            state.user_id,
            state.broadcast_count,
        )
