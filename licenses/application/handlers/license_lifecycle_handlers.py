"""
License lifecycle handlers.

Handlers for the administrative suspend, resume, revoke and renew commands.
"""
import logging

from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_transitions_total
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.dto.license_dto import LicenseStatusDTO
from licenses.domain.events import (
    LicenseRenewed,
    LicenseResumed,
    LicenseRevoked,
    LicenseSuspended,
)
from licenses.domain.services import LicenseRegistry
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class _LicenseLifecycleHandler:
    """Shared wiring for lifecycle handlers."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        event_bus: EventBus = default_event_bus,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repositories."""
        self.registry = LicenseRegistry(license_repository, clock=clock)
        self.event_bus = event_bus


class SuspendLicenseHandler(_LicenseLifecycleHandler):
    """Handler for SuspendLicenseCommand."""

    async def handle(self, command: SuspendLicenseCommand) -> LicenseStatusDTO:
        """
        Handle suspend license command.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is not ACTIVE
        """
        suspended = await self.registry.transition(command.license_id, LicenseStatus.SUSPENDED)
        logger.info("License %s suspended by %s", suspended.id, command.actor)
        license_transitions_total.labels(operation="suspend").inc()
        await self.event_bus.publish(LicenseSuspended(license_id=suspended.id, actor=command.actor))
        return LicenseStatusDTO.from_entity(suspended)


class ResumeLicenseHandler(_LicenseLifecycleHandler):
    """Handler for ResumeLicenseCommand."""

    async def handle(self, command: ResumeLicenseCommand) -> LicenseStatusDTO:
        """
        Handle resume license command.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is not SUSPENDED
        """
        license = await self.registry.find_by_id(command.license_id)
        resumed = await self.registry.license_repository.save(license.resume())
        logger.info("License %s resumed by %s", resumed.id, command.actor)
        license_transitions_total.labels(operation="resume").inc()
        await self.event_bus.publish(LicenseResumed(license_id=resumed.id, actor=command.actor))
        return LicenseStatusDTO.from_entity(resumed)


class RevokeLicenseHandler(_LicenseLifecycleHandler):
    """Handler for RevokeLicenseCommand."""

    async def handle(self, command: RevokeLicenseCommand) -> LicenseStatusDTO:
        """
        Handle revoke license command. Revocation is terminal.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is already revoked
        """
        revoked = await self.registry.transition(command.license_id, LicenseStatus.REVOKED)
        logger.warning("License %s revoked by %s", revoked.id, command.actor)
        license_transitions_total.labels(operation="revoke").inc()
        await self.event_bus.publish(LicenseRevoked(license_id=revoked.id, actor=command.actor))
        return LicenseStatusDTO.from_entity(revoked)


class RenewLicenseHandler(_LicenseLifecycleHandler):
    """Handler for RenewLicenseCommand."""

    async def handle(self, command: RenewLicenseCommand) -> LicenseStatusDTO:
        """
        Handle renew license command.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is revoked
        """
        renewed = await self.registry.extend_expiry(command.license_id, command.add_days)
        logger.info(
            "License %s renewed by %d day(s) until %s",
            renewed.id,
            command.add_days,
            renewed.expires_at,
        )
        license_transitions_total.labels(operation="renew").inc()
        await self.event_bus.publish(
            LicenseRenewed(
                license_id=renewed.id,
                new_expiration=renewed.expires_at,
                actor=command.actor,
            )
        )
        return LicenseStatusDTO.from_entity(renewed)
