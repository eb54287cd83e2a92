"""
Response Cache - Short-lived in-memory cache for provider results.

Entries are stored with the time they were written and are considered
fresh for ``ttl`` seconds. There is no eviction beyond overwriting an entry
when it is refreshed.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 5 * 60


class TTLCache:
    """Process-local map of key -> (data, timestamp) with a fixed expiry."""

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl: Seconds an entry stays fresh
            clock: Monotonic time source, injectable for tests
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def _is_fresh(self, timestamp: float) -> bool:
        return self._clock() - timestamp < self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        data, timestamp = entry
        if not self._is_fresh(timestamp):
            return None
        return data

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key."""
        self._entries[key] = (value, self._clock())

    async def get_or_fetch(self, key: str, fetcher: Callable[[], Awaitable[T]]) -> T:
        """
        Return a fresh cached value or compute, store and return a new one.

        Exceptions raised by ``fetcher`` propagate and nothing is stored.
        """
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry[1]):
            logger.debug(f"Cache hit: {key}")
            return entry[0]

        logger.debug(f"Cache miss: {key}")
        data = await fetcher()
        self.set(key, data)
        return data

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry[1])

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["TTLCache", "DEFAULT_TTL"]
