"""
Quote Cache - TTL and size bounded store in front of the market data client.

Entries are keyed "SYMBOL|MARKET". Expired entries are dropped lazily on
read; the oldest-written entry is evicted eagerly when a write pushes the
cache past its size cap. Concurrent misses on the same key share a single
in-flight fetch.
"""

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from stockscreen.core.config import settings
from stockscreen.core.logger import Logger

logger = Logger("QuoteCache")


@dataclass
class CacheEntry:
    data: Any
    inserted_at: float


class QuoteCache:
    """In-memory cache with process lifetime.

    All mutations happen between awaits on a single event loop, so plain
    dict operations are safe for concurrent coroutines.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        max_size: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = settings.CACHE_TTL_SECONDS if ttl is None else ttl
        self.max_size = settings.CACHE_MAX_SIZE if max_size is None else max_size
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._inflight: Dict[str, asyncio.Future] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(symbol: str, market: str) -> str:
        return f"{symbol.upper()}|{market.upper()}"

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[Any]:
        """Return cached data, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        if self._clock() - entry.inserted_at >= self.ttl:
            del self._entries[key]
            self.misses += 1
            return None

        self.hits += 1
        return entry.data

    def set(self, key: str, data: Any) -> None:
        """Insert or overwrite an entry, evicting the oldest write past the cap."""
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(data=data, inserted_at=self._clock())

        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted {evicted} (size cap {self.max_size})")

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    async def get_or_fetch(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """Cache-or-fetch with per-key de-duplication.

        The first caller on a miss runs `fetcher`; concurrent callers for the
        same key await that same result. Failures are not cached and are
        raised to every waiter.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        pending = self._inflight.get(key)
        if pending is not None:
            # shield: a waiter timing out must not cancel the shared fetch
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                if not pending.cancelled():
                    raise
                # The owning caller was cancelled mid-fetch; take over
                return await self.get_or_fetch(key, fetcher)

        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            data = await fetcher()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
                # Mark retrieved so a failure nobody else awaited is not logged as lost
                future.exception()
            raise
        else:
            self.set(key, data)
            if not future.done():
                future.set_result(data)
            return data
        finally:
            self._inflight.pop(key, None)
