"""Event bus implementations."""

from .in_memory import InMemoryEventBus

__all__ = ["InMemoryEventBus"]
