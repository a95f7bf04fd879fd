from __future__ import annotations

from dataclasses import dataclass, field

from stream_alert.errors import AppError


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError(AppError):
    """Base exception for domain layer."""


@dataclass(frozen=True, slots=True, kw_only=True)
class TimeTravelError(DomainError):
    """Broadcast count went backwards for the same user."""

    user_id: str
    stored_count: int
    fetched_count: int
    message: str = field(init=False)
    code: str = field(init=False, default="DOMAIN_TIME_TRAVEL")

    def __post_init__(self) -> None:  # pragma: no cover - formatting helper
        object.__setattr__(
            self,
            "message",
            (
                f"Broadcast count of user {self.user_id} went backwards: "
                f"{self.stored_count} -> {self.fetched_count}"
            ),
        )
        object.__setattr__(
            self,
            "context",
            {
                "user_id": self.user_id,
                "stored_count": self.stored_count,
                "fetched_count": self.fetched_count,
            },
        )
