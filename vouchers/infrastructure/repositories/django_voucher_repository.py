"""
Django implementation of VoucherRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import DuplicateVoucherCodeError
from core.domain.value_objects import LicenseType, PlanType
from vouchers.domain.voucher import LicenseTemplate, Voucher, VoucherStatus
from vouchers.infrastructure.models import Voucher as VoucherModel
from vouchers.ports.voucher_repository import VoucherRepository

UNUSED = VoucherStatus.UNUSED.value


class DjangoVoucherRepository(VoucherRepository):
    """Django ORM implementation of VoucherRepository."""

    def _to_domain(self, model: VoucherModel) -> Voucher:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Voucher model

        Returns:
            Voucher domain entity
        """
        return Voucher(
            id=model.id,
            code=model.code,
            product_id=model.product_id,
            template=LicenseTemplate(
                license_type=LicenseType(model.license_type),
                plan_type=PlanType(model.plan_type),
                license_duration_days=model.license_duration_days,
                max_devices=model.max_devices,
                max_activations=model.max_activations,
                offline_allowed=model.offline_allowed,
                revalidate_days=model.revalidate_days,
                allowed_version_min=model.allowed_version_min,
                allowed_version_max=model.allowed_version_max,
                modules=model.modules or {},
                features=model.features or {},
                notes=model.notes or "",
            ),
            status=VoucherStatus(model.status),
            batch_name=model.batch_name,
            created_at=model.created_at,
            tenant_id=model.tenant_id,
            license_id=model.license_id,
            used_at=model.used_at,
            used_by_email=model.used_by_email,
            created_by=model.created_by,
        )

    def _create(self, voucher: Voucher) -> VoucherModel:
        template = voucher.template
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                return VoucherModel.objects.create(
                    id=voucher.id,
                    code=voucher.code,
                    status=voucher.status.value,
                    product_id=voucher.product_id,
                    batch_name=voucher.batch_name,
                    license_type=template.license_type.value,
                    plan_type=template.plan_type.value,
                    license_duration_days=template.license_duration_days,
                    max_devices=template.max_devices,
                    max_activations=template.max_activations,
                    offline_allowed=template.offline_allowed,
                    revalidate_days=template.revalidate_days,
                    allowed_version_min=template.allowed_version_min,
                    allowed_version_max=template.allowed_version_max,
                    modules=template.modules,
                    features=template.features,
                    notes=template.notes,
                    created_by=voucher.created_by,
                    created_at=voucher.created_at,
                )
        except IntegrityError as exc:
            raise DuplicateVoucherCodeError(f"Voucher code {voucher.code} already exists") from exc

    async def create(self, voucher: Voucher) -> Voucher:
        model = await sync_to_async(self._create)(voucher)
        return self._to_domain(model)

    async def find_by_id(self, voucher_id: uuid.UUID) -> Optional[Voucher]:
        # pylint: disable=no-member
        model = await sync_to_async(VoucherModel.objects.filter(id=voucher_id).first)()
        return self._to_domain(model) if model else None

    async def find_by_code(self, code: str) -> Optional[Voucher]:
        # pylint: disable=no-member
        model = await sync_to_async(VoucherModel.objects.filter(code=code).first)()
        return self._to_domain(model) if model else None

    async def mark_used(
        self,
        voucher_id: uuid.UUID,
        tenant_id: uuid.UUID,
        license_id: uuid.UUID,
        email: Optional[str],
        used_at: datetime,
    ) -> bool:
        # pylint: disable=no-member
        updated = await sync_to_async(
            VoucherModel.objects.filter(id=voucher_id, status=UNUSED).update
        )(
            status=VoucherStatus.USED.value,
            tenant_id=tenant_id,
            license_id=license_id,
            used_by_email=email,
            used_at=used_at,
        )
        return updated == 1

    async def cancel(self, voucher_id: uuid.UUID) -> bool:
        # pylint: disable=no-member
        updated = await sync_to_async(
            VoucherModel.objects.filter(id=voucher_id, status=UNUSED).update
        )(status=VoucherStatus.CANCELLED.value)
        return updated == 1

    async def count_by_status(self, status: VoucherStatus) -> int:
        # pylint: disable=no-member
        return await sync_to_async(VoucherModel.objects.filter(status=status.value).count)()
