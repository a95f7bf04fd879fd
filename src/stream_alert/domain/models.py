from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfiguredBaseModel(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)


class AlertDecision(str, Enum):
    ALERT = "alert"
    NO_ALERT = "no_alert"

    def should_alert(self) -> bool:
        return self is AlertDecision.ALERT


class StreamerState(ConfiguredBaseModel):
    """Previously observed record. Any field may be missing."""

    user_id: str | None = None
    broadcast_count: int | None = Field(default=None, ge=0)
    broadcast_id: str | None = None

    @property
    def is_complete(self) -> bool:
        return (
            self.user_id is not None
            and self.broadcast_count is not None
            and self.broadcast_id is not None
        )


class FetchedState(ConfiguredBaseModel):
    """Record built from a live status payload; always fully populated."""

    user_id: str
    broadcast_count: int = Field(ge=0)
    broadcast_id: str

    @field_validator("user_id", "broadcast_id", mode="before")
    @classmethod
    def integral_float_as_int(cls, value: Any) -> Any:
        # JSON 42.0 names the same id as 42
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    def as_streamer_state(self) -> StreamerState:
        return StreamerState(
            user_id=self.user_id,
            broadcast_count=self.broadcast_count,
            broadcast_id=self.broadcast_id,
        )


class Online(ConfiguredBaseModel):
    state: FetchedState


class Offline(ConfiguredBaseModel):
    pass


class FetchFailed(ConfiguredBaseModel):
    reason: str
    missing: tuple[str, ...] = ()


FetchResult = Online | Offline | FetchFailed
