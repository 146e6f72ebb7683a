"""Shared in-memory query cache with expire-after-write TTL.

Async-safe via asyncio.Lock. The loader runs under the lock, so concurrent
misses for the same key trigger a single database read.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Memoizes awaitable loaders for a fixed time after each write.

    Args:
        ttl_seconds: Lifetime of an entry. 0 or less disables caching.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[T, float]] = {}
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def _is_fresh(self, written_at: float) -> bool:
        return self._clock() - written_at < self._ttl

    async def get_or_load(self, key: Hashable, loader: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for key, calling loader on a miss."""
        if not self.enabled:
            return await loader()

        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry[1]):
                return entry[0]
            value = await loader()
            self._entries[key] = (value, self._clock())
            return value

    async def invalidate(self) -> None:
        """Drop every entry."""
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
