"""
Django implementation of DeviceActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from activations.domain.activation import DeviceActivation
from activations.infrastructure.models import DeviceActivation as DeviceActivationModel
from activations.ports.activation_repository import DeviceActivationRepository


class DjangoDeviceActivationRepository(DeviceActivationRepository):
    """Django ORM implementation of DeviceActivationRepository."""

    def _to_domain(self, model: DeviceActivationModel) -> DeviceActivation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django DeviceActivation model

        Returns:
            DeviceActivation domain entity
        """
        return DeviceActivation(
            id=model.id,
            license_id=model.license_id,
            device_id_hash=model.device_id_hash,
            app_version=model.app_version,
            activated_at=model.activated_at,
            last_seen_at=model.last_seen_at,
            revoked_at=model.revoked_at,
            ip=model.ip,
            user_agent=model.user_agent,
        )

    def _upsert(self, activation: DeviceActivation) -> DeviceActivationModel:
        defaults = {
            "app_version": activation.app_version,
            "ip": activation.ip,
            "user_agent": (activation.user_agent or "")[:500] or None,
            "last_seen_at": activation.last_seen_at,
            "revoked_at": activation.revoked_at,
        }
        # update_or_create locks the existing row and, when two requests
        # create the same (license, device) at once, retries the lookup
        # after the unique constraint rejects the second insert.
        # pylint: disable=no-member
        model, _ = DeviceActivationModel.objects.update_or_create(
            license_id=activation.license_id,
            device_id_hash=activation.device_id_hash,
            defaults=defaults,
            create_defaults={
                **defaults,
                "id": activation.id,
                "activated_at": activation.activated_at,
            },
        )
        return model

    async def upsert(self, activation: DeviceActivation) -> DeviceActivation:
        model = await sync_to_async(self._upsert)(activation)
        return self._to_domain(model)

    async def touch(self, activation: DeviceActivation) -> bool:
        # pylint: disable=no-member
        updated = await sync_to_async(
            DeviceActivationModel.objects.filter(
                license_id=activation.license_id,
                device_id_hash=activation.device_id_hash,
                revoked_at__isnull=True,
            ).update
        )(
            app_version=activation.app_version,
            ip=activation.ip,
            user_agent=(activation.user_agent or "")[:500] or None,
            last_seen_at=activation.last_seen_at,
        )
        return updated == 1

    async def find_by_license_and_device(
        self, license_id: uuid.UUID, device_id_hash: str
    ) -> Optional[DeviceActivation]:
        # pylint: disable=no-member
        model = await sync_to_async(
            DeviceActivationModel.objects.filter(
                license_id=license_id, device_id_hash=device_id_hash
            ).first
        )()
        return self._to_domain(model) if model else None

    async def count_active_by_license(self, license_id: uuid.UUID) -> int:
        # pylint: disable=no-member
        return await sync_to_async(
            DeviceActivationModel.objects.filter(
                license_id=license_id, revoked_at__isnull=True
            ).count
        )()

    async def count_by_license(self, license_id: uuid.UUID) -> int:
        # pylint: disable=no-member
        return await sync_to_async(
            DeviceActivationModel.objects.filter(license_id=license_id).count
        )()

    async def find_active_by_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        models = await sync_to_async(
            lambda: list(
                DeviceActivationModel.objects.filter(  # pylint: disable=no-member
                    license_id=license_id, revoked_at__isnull=True
                ).order_by("activated_at")
            )
        )()
        return [self._to_domain(model) for model in models]

    async def count_active(self) -> int:
        # pylint: disable=no-member
        return await sync_to_async(
            DeviceActivationModel.objects.filter(revoked_at__isnull=True).count
        )()
