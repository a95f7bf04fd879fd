import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from stream_alert.domain.models import AlertDecision, FetchedState


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    id: str = Field(default_factory=_new_id)
    occurred_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def name(cls) -> str:
        return cls.__name__

    model_config = ConfigDict(frozen=True, extra="forbid")


class BroadcastStarted(DomainEvent):
    state: FetchedState


class CycleSkipped(DomainEvent):
    reason: str


class CycleCompleted(DomainEvent):
    state: FetchedState
    decision: AlertDecision


class CycleFailed(DomainEvent):
    error: str
