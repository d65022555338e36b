"""
Runtime settings stored in the database.

Each known setting key has its own typed value class. Values for keys the
service does not recognise are kept verbatim in :class:`UnknownSetting`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class SettingKey(Enum):
    """Keys of the settings the service understands."""

    REVALIDATION = "revalidation"

    def __str__(self) -> str:
        return self.value


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    return None


@dataclass(frozen=True)
class RevalidationSetting:
    """
    Global revalidation window.

    ``offline_days`` is how long a client may run on an activation token
    before it has to revalidate, when the license has no override.
    """

    offline_days: Optional[int] = None

    key = SettingKey.REVALIDATION

    @classmethod
    def from_value(cls, value: Any) -> "RevalidationSetting":
        """Build from the stored JSON value. Malformed values yield an empty setting."""
        if not isinstance(value, dict):
            return cls()
        return cls(offline_days=_positive_int(value.get("offlineDays")))

    def to_value(self) -> Dict[str, Any]:
        return {"offlineDays": self.offline_days}


@dataclass(frozen=True)
class UnknownSetting:
    """A stored setting whose key has no typed accessor."""

    key: str
    value: Any

    def to_value(self) -> Any:
        return self.value


Setting = Union[RevalidationSetting, UnknownSetting]


def parse_setting(key: str, value: Any) -> Setting:
    """
    Parse a raw stored setting into its typed form.

    Args:
        key: Setting key
        value: JSON value as stored

    Returns:
        RevalidationSetting for ``"revalidation"``, UnknownSetting otherwise
    """
    if key == SettingKey.REVALIDATION.value:
        return RevalidationSetting.from_value(value)
    return UnknownSetting(key=key, value=value)
