"""
RevokeDeviceHandler.

Handles operator revocation of a single device on a license.
"""
import logging

from activations.application.commands.revoke_device import RevokeDeviceCommand
from activations.application.dto.activation_dto import DeviceActivationDTO
from activations.domain.events import DeviceRevoked
from activations.ports.activation_repository import DeviceActivationRepository
from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.exceptions import ActivationNotFoundError
from core.infrastructure.events import event_bus as default_event_bus

logger = logging.getLogger(__name__)


class RevokeDeviceHandler:
    """Handler for RevokeDeviceCommand."""

    def __init__(
        self,
        activation_repository: DeviceActivationRepository,
        event_bus: EventBus = default_event_bus,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repositories."""
        self.activation_repository = activation_repository
        self.event_bus = event_bus
        self.clock = clock

    async def handle(self, command: RevokeDeviceCommand) -> DeviceActivationDTO:
        """
        Handle revoke device command. Revoking a revoked device is a no-op.

        Raises:
            ActivationNotFoundError: If the device was never activated on the license
        """
        activation = await self.activation_repository.find_by_license_and_device(
            command.license_id, command.device_id_hash
        )
        if not activation:
            raise ActivationNotFoundError()

        if activation.is_active:
            activation = await self.activation_repository.upsert(activation.revoke(self.clock()))
            logger.info(
                "Device %s revoked on license %s by %s",
                command.device_id_hash[:12],
                command.license_id,
                command.actor,
            )
            await self.event_bus.publish(
                DeviceRevoked(
                    license_id=command.license_id,
                    device_id_hash=command.device_id_hash,
                    actor=command.actor,
                )
            )

        return DeviceActivationDTO.from_entity(activation)
