"""
UpdateRevalidationSettingHandler.
"""
import logging

from core.application.commands.update_revalidation_setting import (
    UpdateRevalidationSettingCommand,
)
from core.domain.settings import RevalidationSetting, SettingKey
from core.ports.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)


class UpdateRevalidationSettingHandler:
    """Handler for UpdateRevalidationSettingCommand."""

    def __init__(self, settings_repository: SettingsRepository):
        """Initialize handler with repositories."""
        self.settings_repository = settings_repository

    async def handle(self, command: UpdateRevalidationSettingCommand) -> RevalidationSetting:
        setting = RevalidationSetting(offline_days=command.offline_days)
        await self.settings_repository.put(SettingKey.REVALIDATION.value, setting.to_value())
        logger.info(
            "Revalidation window set to %d day(s) by %s", command.offline_days, command.actor
        )
        return setting
