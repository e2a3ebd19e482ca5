# File: sierrha/cache.py
"""
Tagged key/value cache used to keep fetched error pages.

Entries can be dropped in bulk by tag, e.g. ``pageId_42`` whenever the
content of page 42 changes.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Protocol, Union

from sierrha.logger import logger

CacheValue = Union[str, bytes]


class TaggedCache(Protocol):
    def get(self, key: str) -> Optional[CacheValue]: ...

    def set(
        self,
        key: str,
        value: CacheValue,
        tags: Iterable[str] = (),
        lifetime: Optional[int] = None,
    ) -> None: ...


@dataclass(slots=True)
class CacheEntry:
    value: CacheValue
    tags: FrozenSet[str] = field(default_factory=frozenset)
    expires_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryTaggedCache:
    """In-process tagged cache. ``lifetime=None`` means the entry never expires."""

    def __init__(self, identifier: str = "pages", clock: Callable[[], float] = time.monotonic) -> None:
        self.identifier = identifier
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[CacheValue]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def get_tags(self, key: str) -> FrozenSet[str]:
        entry = self._entries.get(key)
        return entry.tags if entry else frozenset()

    def set(
        self,
        key: str,
        value: CacheValue,
        tags: Iterable[str] = (),
        lifetime: Optional[int] = None,
    ) -> None:
        expires_at = None if lifetime is None else self._clock() + lifetime
        self._entries[key] = CacheEntry(value=value, tags=frozenset(tags), expires_at=expires_at)

    def remove(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def flush_by_tag(self, tag: str) -> int:
        """Drop every entry carrying *tag*; returns the number removed."""
        keys = [key for key, entry in self._entries.items() if tag in entry.tags]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.info("Flushed %d %s cache entries tagged %s", len(keys), self.identifier, tag)
        return len(keys)

    def flush(self) -> None:
        self._entries.clear()


class CacheManager:
    """Hands out named cache partitions, creating them on first use."""

    def __init__(self, factory: Callable[[str], MemoryTaggedCache] = MemoryTaggedCache) -> None:
        self._factory = factory
        self._caches: Dict[str, MemoryTaggedCache] = {}

    def get_cache(self, identifier: str) -> MemoryTaggedCache:
        if identifier not in self._caches:
            self._caches[identifier] = self._factory(identifier)
        return self._caches[identifier]

    def flush_caches_by_tag(self, tag: str) -> int:
        return sum(cache.flush_by_tag(tag) for cache in self._caches.values())


__all__ = ["CacheValue", "TaggedCache", "CacheEntry", "MemoryTaggedCache", "CacheManager"]
