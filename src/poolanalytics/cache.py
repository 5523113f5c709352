"""
Response cache for indexer requests.

Entries carry the time they were stored; whether an entry is still fresh is
decided on read against the caller's TTL, so different callers can accept
different staleness for the same URL. Expired entries are not swept, they are
simply ignored and later overwritten. The map is size-bounded with
cachetools' LRUCache so a long-lived process cannot grow it without limit.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from cachetools import LRUCache


@dataclass(frozen=True)
class CacheEntry:
    """A cached response payload and when it was stored."""

    key: str
    timestamp: float
    payload: Any

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.timestamp < ttl_seconds


class ResponseCache:
    """
    Cache of decoded indexer payloads keyed by canonical URL.

    Not thread-safe: it is only touched from the event loop, between awaits.
    """

    def __init__(self, max_size: int = 512, clock: Callable[[], float] = time.monotonic):
        """
        Initialize response cache.

        Args:
            max_size: Maximum number of entries kept (least recently used dropped)
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self.max_size = max_size
        self._clock = clock
        self._entries: LRUCache = LRUCache(maxsize=max_size)
        self._hits = 0
        self._misses = 0

    def now(self) -> float:
        return self._clock()

    def get(self, key: str, ttl_seconds: float) -> Optional[CacheEntry]:
        """
        Get a fresh entry.

        Args:
            key: Canonical URL
            ttl_seconds: Maximum accepted age of the entry

        Returns:
            The entry, or None if missing or older than ttl_seconds
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self.now(), ttl_seconds):
            self._hits += 1
            return entry
        self._misses += 1
        return None

    def set(self, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(key=key, timestamp=self.now(), payload=payload)
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        """Clear all entries and reset statistics."""
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats (hits, misses, size, hit_rate)
        """
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": self._hits / total if total > 0 else 0.0,
        }
