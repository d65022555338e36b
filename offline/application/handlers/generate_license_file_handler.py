"""
GenerateLicenseFileHandler.

Handles issuance of signed offline license files. The nonce claim and the
stored file commit together.
"""
import logging
from typing import Optional

from activations.application.services.attempt_logger import AttemptLogger
from activations.domain.attempt import AttemptChannel, AttemptResult
from activations.ports.attempt_repository import ActivationAttemptRepository
from core.config import ActivationConfig
from core.crypto.signing import Ed25519Signer
from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.exceptions import (
    AppMismatchError,
    NonceAlreadyUsedError,
    OfflineNotAllowedError,
)
from core.domain.value_objects import DeviceFingerprint
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import offline_license_files_issued_total
from core.ports.unit_of_work import UnitOfWork
from licenses.domain.services import LicenseRegistry
from licenses.ports.license_repository import LicenseRepository
from offline.application.commands.generate_license_file import GenerateLicenseFileCommand
from offline.application.dto.offline_dto import LicenseFileDTO
from offline.domain.events import OfflineLicenseIssued
from offline.domain.license_file import OfflineLicenseFile
from offline.domain.request_file import OfflineRequest, OfflineRequestStatus, RequestFile
from offline.domain.services import OfflineLicenseSigner, RequestFileVerifier
from offline.ports.license_file_repository import OfflineLicenseFileRepository
from offline.ports.offline_request_repository import OfflineRequestRepository

logger = logging.getLogger(__name__)


class GenerateLicenseFileHandler:
    """Handler for GenerateLicenseFileCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        offline_request_repository: OfflineRequestRepository,
        license_file_repository: OfflineLicenseFileRepository,
        attempt_repository: ActivationAttemptRepository,
        config: ActivationConfig,
        unit_of_work: UnitOfWork,
        event_bus: EventBus = default_event_bus,
        clock: Clock = utcnow,
        signer: Optional[Ed25519Signer] = None,
    ):
        """Initialize handler with repositories."""
        self.registry = LicenseRegistry(license_repository, clock=clock, event_bus=event_bus)
        self.offline_request_repository = offline_request_repository
        self.license_file_repository = license_file_repository
        self.unit_of_work = unit_of_work
        self.attempts = AttemptLogger(attempt_repository)
        self.license_signer = OfflineLicenseSigner(
            signer or config.offline_signer(),
            fallback_days=config.offline_fallback_days,
            clock=clock,
        )
        self.event_bus = event_bus
        self.clock = clock

    async def handle(self, command: GenerateLicenseFileCommand) -> LicenseFileDTO:
        """
        Handle generate license file command.

        Args:
            command: GenerateLicenseFileCommand

        Returns:
            LicenseFileDTO with the signed payload

        Raises:
            InvalidRequestFileError: If the payload is malformed or the checksum does not match
            LicenseNotFoundError: If the license does not exist
            AppMismatchError: If the license belongs to another product
            LicenseStatusError: If the license is not active
            OfflineNotAllowedError: If the license does not allow offline use
            NonceAlreadyUsedError: If a file was already issued for the nonce
        """
        request_file = RequestFile.from_dict(command.request_file)
        RequestFileVerifier.verify_checksum(request_file)
        payload = request_file.payload
        device_id_hash = DeviceFingerprint(payload.device_fingerprint).hash()
        license = None

        try:
            license = await self.registry.find_by_id(command.license_id)
            if license.product_id != payload.product_id:
                raise AppMismatchError()
            await self.registry.ensure_active(license)

            if not license.offline_allowed:
                await self.offline_request_repository.mark_rejected(
                    OfflineRequest.create(
                        request_file,
                        status=OfflineRequestStatus.REJECTED,
                        tenant_id=license.tenant_id,
                        license_id=license.id,
                        created_by=command.actor,
                        now=self.clock(),
                    )
                )
                raise OfflineNotAllowedError()

            existing = await self.offline_request_repository.find_by_nonce(payload.nonce)
            if existing and existing.is_used:
                raise NonceAlreadyUsedError()

            license_payload, signature = self.license_signer.sign(license, request_file)

            # The nonce stays claimable unless the file is stored with it.
            async with self.unit_of_work.atomic():
                claimed = await self.offline_request_repository.claim(
                    OfflineRequest.create(
                        request_file,
                        status=OfflineRequestStatus.USED,
                        tenant_id=license.tenant_id,
                        license_id=license.id,
                        created_by=command.actor,
                        now=self.clock(),
                    )
                )
                if claimed is None:
                    raise NonceAlreadyUsedError()

                license_file = await self.license_file_repository.save(
                    OfflineLicenseFile.create(
                        offline_request_id=claimed.id,
                        license_id=license.id,
                        nonce=payload.nonce,
                        payload=license_payload,
                        signature_ed25519=signature,
                        public_key_ed25519=self.license_signer.public_key_b64,
                        created_by=command.actor,
                        now=self.clock(),
                    )
                )
        except Exception as exc:
            await self.attempts.record_failure(
                AttemptChannel.OFFLINE,
                exc,
                product_id=payload.product_id,
                license_id=license.id if license else command.license_id,
                license_key=license.key if license else None,
                device_id_hash=device_id_hash,
                ip=command.ip,
            )
            raise

        await self.attempts.record(
            AttemptChannel.OFFLINE,
            AttemptResult.SUCCESS,
            product_id=payload.product_id,
            license_id=license.id,
            license_key=license.key,
            device_id_hash=device_id_hash,
            ip=command.ip,
        )
        offline_license_files_issued_total.inc()
        logger.info(
            "Offline license file %s issued for license %s by %s",
            license_file.file_name,
            license.id,
            command.actor,
        )
        await self.event_bus.publish(
            OfflineLicenseIssued(
                license_id=license.id,
                file_id=license_file.id,
                nonce=payload.nonce,
                actor=command.actor,
            )
        )
        return LicenseFileDTO.from_entity(license_file)
