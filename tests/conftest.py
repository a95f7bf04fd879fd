import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from stream_alert.config import Settings
from stream_alert.domain.models import FetchedState


@pytest.fixture
def fake_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Provide the environment expected by Settings, rooted in *tmp_path*."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STREAM_ALERT_STATUS_URL", "https://status.test/live")
    monkeypatch.setenv("STREAM_ALERT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STREAM_ALERT_CONFIG_DIR", str(tmp_path / "config"))
    return tmp_path


@pytest.fixture
def settings(fake_env: Path) -> Settings:
    return Settings()


@pytest.fixture
def make_state() -> Callable[..., FetchedState]:
    def factory(
        user_id: str = "42", broadcast_count: int = 5, broadcast_id: str = "100"
    ) -> FetchedState:
        return FetchedState(
            user_id=user_id,
            broadcast_count=broadcast_count,
            broadcast_id=broadcast_id,
        )

    return factory


@pytest.fixture
def httpx_transport() -> Callable[
    [Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient
]:
    """Create httpx.AsyncClient with a custom MockTransport."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def json_handler() -> Callable[[Any], Callable[[httpx.Request], httpx.Response]]:
    """Return a MockTransport handler answering every request with *payload*."""

    def factory(payload: Any) -> Callable[[httpx.Request], httpx.Response]:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=json.dumps(payload).encode())

        return handler

    return factory
