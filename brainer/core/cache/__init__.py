"""Recall result caches."""
from brainer.core.cache.base import CacheStore
from brainer.core.cache.memory import InMemoryCacheStore

__all__ = ["CacheStore", "InMemoryCacheStore"]
