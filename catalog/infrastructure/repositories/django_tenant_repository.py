"""
Django implementation of TenantRepository port.
"""

import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from catalog.domain.tenant import Tenant, TenantStatus
from catalog.infrastructure.models import Tenant as TenantModel
from catalog.ports.tenant_repository import TenantRepository
from core.domain.value_objects import Email


class DjangoTenantRepository(TenantRepository):
    """Django ORM implementation of TenantRepository."""

    def _to_domain(self, model: TenantModel) -> Tenant:
        return Tenant(
            id=model.id,
            trade_name=model.trade_name,
            legal_name=model.legal_name,
            contact_email=Email(model.contact_email) if model.contact_email else None,
            contact_phone=model.contact_phone,
            status=TenantStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _save(self, tenant: Tenant) -> TenantModel:
        # pylint: disable=no-member
        model, _ = TenantModel.objects.update_or_create(
            id=tenant.id,
            defaults={
                "trade_name": tenant.trade_name,
                "legal_name": tenant.legal_name,
                "contact_email": str(tenant.contact_email) if tenant.contact_email else None,
                "contact_phone": tenant.contact_phone,
                "status": tenant.status.value,
            },
        )
        return model

    async def save(self, tenant: Tenant) -> Tenant:
        model = await sync_to_async(self._save)(tenant)
        return self._to_domain(model)

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[Tenant]:
        # pylint: disable=no-member
        model = await sync_to_async(TenantModel.objects.filter(id=tenant_id).first)()
        return self._to_domain(model) if model else None

    async def find_by_contact_email(self, email: str) -> Optional[Tenant]:
        # pylint: disable=no-member
        model = await sync_to_async(
            TenantModel.objects.filter(contact_email__iexact=email.strip())
            .order_by("created_at")
            .first
        )()
        return self._to_domain(model) if model else None
