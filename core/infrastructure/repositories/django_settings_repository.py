"""
Django implementation of SettingsRepository port.

Reads go through the cache; writes replace the row and drop the cached value.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async

from core.infrastructure.cache import CachePort
from core.infrastructure.cache_adapters import cache_adapter
from core.infrastructure.models import Setting as SettingModel
from core.ports.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)

_MISSING = {"__missing__": True}


class DjangoSettingsRepository(SettingsRepository):
    """Django ORM implementation of SettingsRepository with read-through caching."""

    def __init__(self, cache: CachePort = cache_adapter, cache_timeout: int = 60):
        self.cache = cache
        self.cache_timeout = cache_timeout

    @staticmethod
    def _cache_key(key: str) -> str:
        return f"setting:{key}"

    async def get(self, key: str) -> Optional[Any]:
        cached = await self.cache.get(self._cache_key(key))
        if cached is not None:
            return None if cached == _MISSING else cached

        # pylint: disable=no-member
        model = await sync_to_async(SettingModel.objects.filter(key=key).first)()
        value = model.value_json if model else None
        await self.cache.set(
            self._cache_key(key), _MISSING if value is None else value, self.cache_timeout
        )
        return value

    async def put(self, key: str, value: Any) -> None:
        # pylint: disable=no-member
        await sync_to_async(SettingModel.objects.update_or_create)(
            key=key, defaults={"value_json": value}
        )
        await self.cache.delete(self._cache_key(key))
        logger.info("Setting %s updated", key)
