"""
Base interface for recall result caches.

A cache is purely an optimization: a miss may only cost latency, never
change which notes are recalled.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

V = TypeVar("V")


class CacheStore(ABC, Generic[V]):
    """Bounded key/value store injected into recall sessions."""

    @abstractmethod
    def get(self, key: str) -> V | None:
        """Return the cached value or None on a miss."""
        pass

    @abstractmethod
    def set(self, key: str, value: V) -> None:
        """Store a value, evicting as needed to stay within bounds."""
        pass

    @abstractmethod
    def evict_oldest(self) -> str | None:
        """Drop the oldest-inserted entry and return its key."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
