"""
UpdateRevalidationSettingCommand.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class UpdateRevalidationSettingCommand:
    """Command to set the global revalidation window."""

    offline_days: int
    actor: Optional[str] = None

    def __post_init__(self):
        """Validate window length."""
        if isinstance(self.offline_days, bool) or not 1 <= self.offline_days <= 365:
            raise ValueError("offline_days must be between 1 and 365")
