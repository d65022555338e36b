"""
Django cache implementation of CachePort.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import caches

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)


class DjangoCacheAdapter(CachePort):
    """
    CachePort backed by a Django cache alias (Redis in production,
    local memory in tests).

    Backend errors are logged and reported as misses so a cache outage
    never fails a request.
    """

    def __init__(self, alias: str = "default", key_prefix: str = "las"):
        self.alias = alias
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await sync_to_async(caches[self.alias].get)(self._key(key))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return None
        logger.debug("Cache %s: %s", "hit" if value is not None else "miss", key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        try:
            await sync_to_async(caches[self.alias].set)(self._key(key), value, timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)

    async def delete(self, key: str) -> None:
        try:
            await sync_to_async(caches[self.alias].delete)(self._key(key))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
