"""Query result cache for the gnomAD client.

Gene queries are large (every variant in the gene plus ClinVar annotations), so
results are kept for an hour and the number of entries is bounded; the least
recently used entry goes first.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from collections.abc import Hashable
from typing import Generic, TypeVar

from ..constants import API_CACHE_MAX_SIZE, API_CACHE_TTL_SECONDS

T = TypeVar("T")

MISSING = object()


class QueryCache(Generic[T]):
    """Async-safe LRU cache with per-entry expiry.

    Cached values may be falsy (an empty search result), so lookups report
    presence separately through ``contains``/``get`` with a default.
    """

    def __init__(self, maxsize: int = API_CACHE_MAX_SIZE, ttl: float = API_CACHE_TTL_SECONDS):
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._entries: OrderedDict[Hashable, tuple[T, float]] = OrderedDict()
        self._maxsize = maxsize
        self._ttl = ttl
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, stored_at: float) -> bool:
        return time.monotonic() - stored_at > self._ttl

    async def get(self, key: Hashable, default: object = None) -> T | object:
        async with self._lock:
            entry = self._entries.get(key, MISSING)
            if entry is MISSING:
                self.misses += 1
                return default

            value, stored_at = entry  # type: ignore[misc]
            if self._expired(stored_at):
                del self._entries[key]
                self.misses += 1
                return default

            self._entries.move_to_end(key)
            self.hits += 1
            return value

    async def contains(self, key: Hashable) -> bool:
        return await self.get(key, MISSING) is not MISSING

    async def set(self, key: Hashable, value: T) -> None:
        async with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._maxsize:
                self._entries.popitem(last=False)
            self._entries[key] = (value, time.monotonic())

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
