"""In-process LRU content cache with per-entry TTL.

One instance is shared by every chat request in the process. All reads and
writes go through a single lock; entries are small and operations never
block on I/O, so contention stays low. Concurrent misses on the same URL may
both fetch; the last ``put`` wins, which is harmless because page content is
the same for a given URL.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import TYPE_CHECKING

import structlog

from docpilot.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


class ContentCache:
    """Bounded, time-expiring mapping from normalised URL to extracted markup."""

    def __init__(
        self,
        max_entries: int,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Presence only; does not touch recency or evict expired entries.
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> str | None:
        """Return the cached value, or None on miss.

        An expired entry is removed and reported as a miss. A hit becomes the
        most recently used entry.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._entries[key]
                log.debug("cache_expired", key=key)
                return None
            self._entries.move_to_end(key)
            return entry.value

    def put(self, key: str, value: str) -> None:
        """Insert or replace ``key``, evicting the least recently used entry when full."""
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + self._ttl_seconds,
            )
            if len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("cache_evicted", key=evicted)
