"""Process-local cache for derived view data (category breadcrumbs, etc.)"""

import logging
import time
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Any

from cachetools import TTLCache

from storefront.core.config import settings

logger = logging.getLogger(__name__)

SEARCH_CATEGORIES_MODEL_KEY = "storefront.search.categories-{0}-{1}-{2}"


class MemoryCacheManager:
    """
    Read-through cache bounded both in size and in entry lifetime.

    Once max_entries is reached the least recently used entry is evicted.
    Two concurrent misses for the same key may both run the factory;
    the last one to finish wins.
    """

    def __init__(
        self,
        default_ttl_minutes: int = 60,
        max_entries: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._entries: TTLCache = TTLCache(maxsize=max_entries, ttl=default_ttl_minutes * 60, timer=timer)

    @property
    def max_entries(self) -> int:
        return int(self._entries.maxsize)

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    async def get_or_set(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for key, computing and storing it on a miss."""
        value = self.get(key)
        if value is not None:
            return value

        logger.debug(f"Cache miss: {key}")
        value = await factory()
        self.set(key, value)
        return value


@lru_cache
def get_cache_manager() -> MemoryCacheManager:
    """Get the process-wide cache manager"""
    return MemoryCacheManager(
        default_ttl_minutes=settings.CACHE_TIME_MINUTES,
        max_entries=settings.CACHE_MAX_ENTRIES,
    )
