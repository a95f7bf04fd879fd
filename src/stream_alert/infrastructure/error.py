from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stream_alert.errors import AppError


@dataclass(frozen=True, slots=True, kw_only=True)
class InfraError(AppError):
    """Base exception for infrastructure layer."""


@dataclass(frozen=True, slots=True, kw_only=True)
class StateStoreError(InfraError):
    message: str
    context: dict[str, Any] | None = None
    code: str = field(init=False, default="INFRA_STATE_STORE_FAILED")


@dataclass(frozen=True, slots=True, kw_only=True)
class AlreadyRunningError(InfraError):
    path: Path
    message: str = field(init=False)
    code: str = field(init=False, default="INFRA_ALREADY_RUNNING")

    def __post_init__(self) -> None:  # pragma: no cover - formatting helper
        object.__setattr__(
            self, "message", f"Another instance holds the lock {self.path}"
        )
        object.__setattr__(self, "context", {"path": str(self.path)})


@dataclass(frozen=True, slots=True, kw_only=True)
class DirectoryBootstrapError(InfraError):
    message: str
    context: dict[str, Any] | None = None
    code: str = field(init=False, default="INFRA_DIRECTORY_BOOTSTRAP_FAILED")


@dataclass(frozen=True, slots=True, kw_only=True)
class LoggingSetupError(InfraError):
    message: str
    context: dict[str, Any] | None = None
    code: str = field(init=False, default="INFRA_LOGGING_SETUP_FAILED")


@dataclass(frozen=True, slots=True, kw_only=True)
class NoAlertSoundsError(InfraError):
    path: Path
    message: str = field(init=False)
    code: str = field(init=False, default="INFRA_NO_ALERT_SOUNDS")

    def __post_init__(self) -> None:  # pragma: no cover - formatting helper
        object.__setattr__(
            self, "message", f"No alert sounds configured in {self.path}"
        )
        object.__setattr__(self, "context", {"path": str(self.path)})


@dataclass(frozen=True, slots=True, kw_only=True)
class AudioPlaybackError(InfraError):
    message: str
    context: dict[str, Any] | None = None
    code: str = field(init=False, default="INFRA_AUDIO_PLAYBACK_FAILED")
