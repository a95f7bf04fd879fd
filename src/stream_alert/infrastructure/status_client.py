from __future__ import annotations

from typing import Any

import httpx
from aiolimiter import AsyncLimiter
from loguru import logger
from pydantic import ValidationError

from stream_alert.application.ports import StatusClientProtocol
from stream_alert.domain.models import (
    FetchedState,
    FetchFailed,
    FetchResult,
    Offline,
    Online,
)

_MISSING = object()


def _lookup(payload: Any, path: str) -> Any:
    """Resolve a dotted *path* inside nested JSON objects."""
    node = payload
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return _MISSING
        node = node[key]
    return node


class HttpStatusClient(StatusClientProtocol):
    """Fetch the live status of one streamer with a single HTTP GET."""

    def __init__(
        self,
        url: str,
        *,
        status_field: str = "status",
        online_status: str = "live",
        user_id_field: str = "user_id",
        broadcast_count_field: str = "broadcast_count",
        broadcast_id_field: str = "broadcast_id",
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
        async_limiter: AsyncLimiter | None = None,
    ) -> None:
        self.url = url
        self.status_field = status_field
        self.online_status = online_status
        self.fields = {
            "user_id": user_id_field,
            "broadcast_count": broadcast_count_field,
            "broadcast_id": broadcast_id_field,
        }
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._limiter = async_limiter or AsyncLimiter(10, 10)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch(self) -> FetchResult:
        try:
            async with self._limiter:
                r = await self._http.get(self.url)
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPError as e:
            return FetchFailed(reason=f"request failed: {e!r}")
        except ValueError as e:
            return FetchFailed(reason=f"response is not JSON: {e}")
        return self.parse(payload)

    def parse(self, payload: Any) -> FetchResult:
        if not isinstance(payload, dict):
            return FetchFailed(reason="response is not a JSON object")

        status = _lookup(payload, self.status_field)
        if status is _MISSING:
            return FetchFailed(reason=f"no {self.status_field!r} field in response")
        if str(status) != self.online_status:
            return Offline()

        values: dict[str, Any] = {}
        missing: list[str] = []
        for name, path in self.fields.items():
            value = _lookup(payload, path)
            if value is _MISSING or value is None:
                logger.warning("Online status without {!r} field", path)
                missing.append(path)
            else:
                values[name] = value
        if missing:
            return FetchFailed(
                reason=f"missing fields: {', '.join(missing)}", missing=tuple(missing)
            )

        try:
            return Online(state=FetchedState.model_validate(values))
        except ValidationError as e:
            return FetchFailed(reason=f"invalid fields: {e}")
