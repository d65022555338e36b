"""
Settings repository port (interface).

Runtime settings are key/JSON pairs; callers parse values with
``core.domain.settings.parse_setting`` or the typed accessors below.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from core.domain.settings import RevalidationSetting, SettingKey


class SettingsRepository(ABC):
    """Abstract repository for stored runtime settings."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Get the raw JSON value stored under ``key``.

        Args:
            key: Setting key

        Returns:
            Stored value or None if the key is not set
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Args:
            key: Setting key
            value: JSON-compatible value
        """
        pass

    async def get_revalidation(self) -> RevalidationSetting:
        """Typed accessor for the ``revalidation`` setting."""
        return RevalidationSetting.from_value(await self.get(SettingKey.REVALIDATION.value))
