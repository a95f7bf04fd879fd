from __future__ import annotations

from dataclasses import dataclass, field

from stream_alert.errors import AppError


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplicationError(AppError):
    """Base exception for application layer."""


@dataclass(frozen=True, slots=True, kw_only=True)
class WatcherRunError(ApplicationError):
    """Raised when Watcher.run_once fails; the watch loop does not retry."""

    error: Exception
    message: str = field(init=False, default="Watcher run_once failed")
    code: str = field(init=False, default="APP_WATCHER_RUN_FAILED")
    context: dict[str, object] = field(init=False)

    def __post_init__(self) -> None:  # pragma: no cover - formatting helper
        object.__setattr__(self, "context", {"error": repr(self.error)})
