"""In-memory report cache with LRU eviction and fixed expiry."""

from __future__ import annotations

import logging
import time
from hashlib import sha256
from typing import Callable

from cachetools import TTLCache

from .models import StatsReport

LOGGER = logging.getLogger(__name__)


def cache_key(credential: str) -> str:
    """Derive a cache key that does not retain the raw token."""

    return "stats-" + sha256(credential.encode("utf-8")).hexdigest()


class ReportCache:
    """Bounded key to report store.

    Entries expire ``ttl`` seconds after insertion regardless of reads.
    Once ``max_entries`` are stored the least recently used entry is
    evicted. ``max_entries=0`` disables storage.
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max(max_entries, 0)
        self._cache: TTLCache[str, StatsReport] | None = None
        if self._max_entries:
            self._cache = TTLCache(maxsize=self._max_entries, ttl=max(ttl, 0.0), timer=clock)

    def __len__(self) -> int:
        if self._cache is None:
            return 0
        self._cache.expire()
        return len(self._cache)

    def get(self, key: str) -> StatsReport | None:
        if self._cache is None:
            return None
        self._cache.expire()
        report = self._cache.get(key)
        if report is None:
            LOGGER.debug("Cache miss")
        return report

    def set(self, key: str, value: StatsReport) -> None:
        if self._cache is None:
            return
        self._cache[key] = value

    def clear(self) -> None:
        if self._cache is not None:
            self._cache.clear()


__all__ = ["ReportCache", "cache_key"]
