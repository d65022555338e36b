"""
RevalidateHandler.

Handles token revalidation for devices that are already activated.
Revalidation never admits new devices, so caps are not re-checked.
"""
import logging
from typing import Optional

from activations.application.commands.revalidate import RevalidateCommand
from activations.application.dto.activation_dto import ActivationTokenDTO
from activations.application.services.attempt_logger import AttemptLogger
from activations.domain.attempt import AttemptChannel, AttemptResult
from activations.domain.events import DeviceRevalidated
from activations.domain.services import ActivationTokenIssuer, DeviceActivationTracker
from activations.ports.activation_repository import DeviceActivationRepository
from activations.ports.attempt_repository import ActivationAttemptRepository
from core.config import ActivationConfig
from core.crypto.tokens import TokenSigner
from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.exceptions import AppMismatchError
from core.domain.value_objects import DeviceFingerprint
from core.infrastructure.events import event_bus as default_event_bus
from core.ports.settings_repository import SettingsRepository
from licenses.domain.services import LicenseRegistry
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class RevalidateHandler:
    """Handler for RevalidateCommand."""

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

    async def handle(self, command: RevalidateCommand) -> ActivationTokenDTO:
        """
        Handle revalidate command.

        Args:
            command: RevalidateCommand

        Returns:
            ActivationTokenDTO with a freshly issued token

        Raises:
            InvalidTokenError: If the presented token does not verify
            LicenseNotFoundError: If the token's license no longer exists
            AppMismatchError: If the license moved to another product
            LicenseStatusError: If the license is not active
            DeviceNotActiveError: If the device was never admitted or was revoked
        """
        # Token failures are rejected before anything is attributable.
        claims = self.issuer.read(command.activation_token)
        device_id_hash = DeviceFingerprint(command.device_fingerprint).hash()
        fields = {
            "product_id": claims.product_id,
            "license_id": claims.license_id,
            "device_id_hash": device_id_hash,
            "ip": command.ip,
        }

        try:
            license = await self.registry.find_by_id(claims.license_id)
            if license.product_id != claims.product_id:
                raise AppMismatchError()
            await self.registry.ensure_active(license)
            activation = await self.tracker.require_active(license.id, device_id_hash)
            await self.tracker.touch(
                activation, command.app_version, ip=command.ip, user_agent=command.user_agent
            )
            issued = await self.issuer.issue(license, device_id_hash)
        except Exception as exc:
            await self.attempts.record_failure(AttemptChannel.REVALIDATE, exc, **fields)
            raise

        await self.attempts.record(AttemptChannel.REVALIDATE, AttemptResult.SUCCESS, **fields)
        logger.debug("Device %s revalidated on license %s", device_id_hash[:12], license.id)
        await self.event_bus.publish(
            DeviceRevalidated(license_id=license.id, device_id_hash=device_id_hash)
        )
        return ActivationTokenDTO.from_issued(issued)
