from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class AppError(Exception):
    """Fatal error of any layer; the CLI maps it to exit status 1.

    ``code`` is a stable identifier such as ``DOMAIN_TIME_TRAVEL``;
    ``context`` carries the values needed to diagnose the failure.
    """

    message: str
    code: str | None = None
    context: Mapping[str, Any] | None = None

    @property
    def label(self) -> str:
        return self.code or type(self).__name__

    def describe(self) -> str:
        """One-line summary with the code and sorted context."""
        details = ", ".join(
            f"{key}={value!r}" for key, value in sorted((self.context or {}).items())
        )
        head = f"[{self.label}] {self.message}"
        return f"{head} ({details})" if details else head

    def __str__(self) -> str:
        return self.message
