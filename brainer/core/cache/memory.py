"""In-process FIFO cache."""

from typing import TypeVar

from brainer.core.cache.base import CacheStore

V = TypeVar("V")


class InMemoryCacheStore(CacheStore[V]):
    """
    Insertion-ordered cache with FIFO eviction.

    Reads do not refresh an entry's position; once max_entries is exceeded
    the single oldest-inserted entry is dropped.
    """

    def __init__(self, max_entries: int = 50):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: dict[str, V] = {}

    def get(self, key: str) -> V | None:
        return self._entries.get(key)

    def set(self, key: str, value: V) -> None:
        # Overwriting keeps the original insertion position
        self._entries[key] = value
        while len(self._entries) > self.max_entries:
            self.evict_oldest()

    def evict_oldest(self) -> str | None:
        if not self._entries:
            return None
        oldest = next(iter(self._entries))
        del self._entries[oldest]
        return oldest

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
