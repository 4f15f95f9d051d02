"""
Category Name Cache - Process-wide cache of category names for AI prompts

No TTL: the cache only goes stale when categories change, and every category
mutation calls invalidate(). The value is an immutable tuple swapped in
wholesale, so concurrent readers never observe a partially built list.
"""
from typing import Awaitable, Callable, List, Optional, Tuple

import structlog

from packages.common.metrics import CATEGORY_CACHE_EVENTS

logger = structlog.get_logger()


class CategoryNameCache:

    def __init__(self):
        self._names: Optional[Tuple[str, ...]] = None
        self._generation = 0

    @property
    def loaded(self) -> bool:
        return self._names is not None

    async def get_or_load(self, loader: Callable[[], Awaitable[List[str]]]) -> List[str]:
        """Return cached names, calling `loader` on a miss"""
        names = self._names
        if names is not None:
            CATEGORY_CACHE_EVENTS.labels(event="hit").inc()
            return list(names)

        CATEGORY_CACHE_EVENTS.labels(event="miss").inc()
        generation = self._generation
        loaded = tuple(await loader())

        # An invalidate() during the load means these names may already be stale
        if generation == self._generation:
            self._names = loaded

        logger.debug("category_names_loaded", count=len(loaded))
        return list(loaded)

    def invalidate(self) -> None:
        self._generation += 1
        self._names = None
        CATEGORY_CACHE_EVENTS.labels(event="invalidate").inc()
        logger.info("category_name_cache_invalidated")


# Shared instance for the API process; inject a fresh one in tests
category_name_cache = CategoryNameCache()
