"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.utils import timezone

from core.domain.value_objects import LicenseStatus, LicenseType, PlanType
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """Django ORM implementation of LicenseRepository."""

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            key=model.key,
            tenant_id=model.tenant_id,
            product_id=model.product_id,
            license_type=LicenseType(model.license_type),
            plan_type=PlanType(model.plan_type),
            status=LicenseStatus(model.status),
            starts_at=model.starts_at,
            expires_at=model.expires_at,
            max_devices=model.max_devices,
            max_activations=model.max_activations,
            offline_allowed=model.offline_allowed,
            revalidate_days=model.revalidate_days,
            allowed_version_min=model.allowed_version_min,
            allowed_version_max=model.allowed_version_max,
            modules=dict(model.modules or {}),
            features=dict(model.features or {}),
            notes=model.notes or "",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _save(self, license: License) -> LicenseModel:
        # pylint: disable=no-member
        model, _ = LicenseModel.objects.update_or_create(
            id=license.id,
            defaults={
                "key": license.key,
                "tenant_id": license.tenant_id,
                "product_id": license.product_id,
                "license_type": license.license_type.value,
                "plan_type": license.plan_type.value,
                "status": license.status.value,
                "starts_at": license.starts_at,
                "expires_at": license.expires_at,
                "max_devices": license.max_devices,
                "max_activations": license.max_activations,
                "offline_allowed": license.offline_allowed,
                "revalidate_days": license.revalidate_days,
                "allowed_version_min": license.allowed_version_min,
                "allowed_version_max": license.allowed_version_max,
                "modules": license.modules,
                "features": license.features,
                "notes": license.notes,
            },
        )
        return model

    async def save(self, license: License) -> License:
        model = await sync_to_async(self._save)(license)
        return self._to_domain(model)

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        # pylint: disable=no-member
        model = await sync_to_async(LicenseModel.objects.filter(id=license_id).first)()
        return self._to_domain(model) if model else None

    async def find_by_key_and_product(
        self, key: str, product_id: uuid.UUID
    ) -> Optional[License]:
        # pylint: disable=no-member
        model = await sync_to_async(
            LicenseModel.objects.filter(key=key, product_id=product_id).first
        )()
        return self._to_domain(model) if model else None

    async def update_status(
        self,
        license_id: uuid.UUID,
        new_status: LicenseStatus,
        expected_status: Optional[LicenseStatus] = None,
    ) -> bool:
        # pylint: disable=no-member
        queryset = LicenseModel.objects.filter(id=license_id)
        if expected_status is not None:
            queryset = queryset.filter(status=expected_status.value)
        updated = await sync_to_async(queryset.update)(
            status=new_status.value, updated_at=timezone.now()
        )
        return updated > 0

    async def find_active_expired(self, now: datetime, limit: int = 500) -> List[License]:
        models = await sync_to_async(
            lambda: list(
                LicenseModel.objects.filter(  # pylint: disable=no-member
                    status=LicenseStatus.ACTIVE.value, expires_at__lt=now
                ).order_by("expires_at")[:limit]
            )
        )()
        return [self._to_domain(model) for model in models]

    async def count_by_status(self, status: LicenseStatus) -> int:
        # pylint: disable=no-member
        return await sync_to_async(LicenseModel.objects.filter(status=status.value).count)()
