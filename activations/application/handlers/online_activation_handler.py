"""
OnlineActivationHandler.

Handles the online activation command: validates a license key for a
product, admits the device and issues an activation token.
"""
import logging
from typing import Optional

from activations.application.commands.online_activation import OnlineActivationCommand
from activations.application.dto.activation_dto import ActivationTokenDTO
from activations.application.services.attempt_logger import AttemptLogger
from activations.domain.attempt import AttemptChannel, AttemptResult
from activations.domain.events import DeviceActivated
from activations.domain.services import ActivationTokenIssuer, DeviceActivationTracker
from activations.ports.activation_repository import DeviceActivationRepository
from activations.ports.attempt_repository import ActivationAttemptRepository
from core.config import ActivationConfig
from core.crypto.tokens import TokenSigner
from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.value_objects import DeviceFingerprint
from core.infrastructure.events import event_bus as default_event_bus
from core.ports.settings_repository import SettingsRepository
from licenses.domain.services import LicenseRegistry, VersionPolicy
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class OnlineActivationHandler:
    """Handler for OnlineActivationCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: DeviceActivationRepository,
        attempt_repository: ActivationAttemptRepository,
        settings_repository: SettingsRepository,
        config: ActivationConfig,
        event_bus: EventBus = default_event_bus,
        clock: Clock = utcnow,
        signer: Optional[TokenSigner] = None,
    ):
        """Initialize handler with repositories."""
        self.registry = LicenseRegistry(license_repository, clock=clock, event_bus=event_bus)
        self.tracker = DeviceActivationTracker(activation_repository, clock=clock)
        self.issuer = ActivationTokenIssuer(config, settings_repository, signer=signer, clock=clock)
        self.attempts = AttemptLogger(attempt_repository)
        self.event_bus = event_bus

    async def handle(self, command: OnlineActivationCommand) -> ActivationTokenDTO:
        """
        Handle online activation command.

        Args:
            command: OnlineActivationCommand

        Returns:
            ActivationTokenDTO with the signed token and its window

        Raises:
            LicenseNotFoundError: If no license has the key for the product
            LicenseStatusError: If the license is not active
            VersionBlockedError: If the app version is outside the allowed window
            DeviceLimitExceededError: If a new device would exceed a cap
        """
        device_id_hash = DeviceFingerprint(command.device_fingerprint).hash()
        license_key = command.license_key.strip()
        license = None

        try:
            license = await self.registry.find_by_key_and_product(license_key, command.product_id)
            await self.registry.ensure_active(license)
            VersionPolicy.check(license, command.app_version)
            activation = await self.tracker.admit(
                license,
                device_id_hash,
                command.app_version,
                ip=command.ip,
                user_agent=command.user_agent,
            )
            issued = await self.issuer.issue(license, device_id_hash)
        except Exception as exc:
            await self.attempts.record_failure(
                AttemptChannel.ONLINE,
                exc,
                product_id=command.product_id,
                license_id=license.id if license else None,
                license_key=license_key,
                device_id_hash=device_id_hash,
                ip=command.ip,
            )
            raise

        await self.attempts.record(
            AttemptChannel.ONLINE,
            AttemptResult.SUCCESS,
            product_id=command.product_id,
            license_id=license.id,
            license_key=license_key,
            device_id_hash=device_id_hash,
            ip=command.ip,
        )
        logger.info(
            "Device %s activated on license %s",
            device_id_hash[:12],
            license.id,
            extra={"license_id": str(license.id), "product_id": str(command.product_id)},
        )
        await self.event_bus.publish(
            DeviceActivated(
                license_id=license.id,
                activation_id=activation.id,
                device_id_hash=device_id_hash,
            )
        )
        return ActivationTokenDTO.from_issued(issued)
