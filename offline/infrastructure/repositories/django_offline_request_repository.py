"""
Django implementation of OfflineRequestRepository port.
"""
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from offline.domain.request_file import OfflineRequest, OfflineRequestStatus
from offline.infrastructure.models import OfflineRequest as OfflineRequestModel
from offline.ports.offline_request_repository import OfflineRequestRepository

USED = OfflineRequestStatus.USED.value
REJECTED = OfflineRequestStatus.REJECTED.value


class DjangoOfflineRequestRepository(OfflineRequestRepository):
    """Django ORM implementation of OfflineRequestRepository."""

    def _to_domain(self, model: OfflineRequestModel) -> OfflineRequest:
        """
        Convert Django model to domain entity.

        Args:
            model: Django OfflineRequest model

        Returns:
            OfflineRequest domain entity
        """
        return OfflineRequest(
            id=model.id,
            nonce=model.nonce,
            product_id=model.product_id,
            payload=model.payload,
            payload_hash=model.payload_hash,
            status=OfflineRequestStatus(model.status),
            tenant_id=model.tenant_id,
            license_id=model.license_id,
            used_at=model.used_at,
            created_by=model.created_by,
            created_at=model.created_at,
        )

    def _fields(self, request: OfflineRequest) -> dict:
        return {
            "product_id": request.product_id,
            "tenant_id": request.tenant_id,
            "license_id": request.license_id,
            "payload": request.payload,
            "payload_hash": request.payload_hash,
            "status": request.status.value,
            "used_at": request.used_at,
            "created_by": request.created_by,
        }

    def _create(self, request: OfflineRequest) -> Optional[OfflineRequestModel]:
        """Insert ``request``; None if another writer created the nonce first."""
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                return OfflineRequestModel.objects.create(
                    id=request.id,
                    nonce=request.nonce,
                    created_at=request.created_at,
                    **self._fields(request),
                )
        except IntegrityError:
            return None

    def _transition(self, request: OfflineRequest) -> Optional[OfflineRequestModel]:
        """Write ``request`` over its nonce unless the stored row is USED."""
        # pylint: disable=no-member
        updated = (
            OfflineRequestModel.objects.filter(nonce=request.nonce)
            .exclude(status=USED)
            .update(**self._fields(request))
        )
        if updated:
            return OfflineRequestModel.objects.get(nonce=request.nonce)
        if OfflineRequestModel.objects.filter(nonce=request.nonce).exists():
            return None
        created = self._create(request)
        if created is None:
            # Lost the insert; retry once against the row that won.
            updated = (
                OfflineRequestModel.objects.filter(nonce=request.nonce)
                .exclude(status=USED)
                .update(**self._fields(request))
            )
            return OfflineRequestModel.objects.get(nonce=request.nonce) if updated else None
        return created

    async def find_by_nonce(self, nonce: str) -> Optional[OfflineRequest]:
        # pylint: disable=no-member
        model = await sync_to_async(OfflineRequestModel.objects.filter(nonce=nonce).first)()
        return self._to_domain(model) if model else None

    async def record_received(self, request: OfflineRequest) -> OfflineRequest:
        def _record():
            created = self._create(request)
            if created is not None:
                return created
            return OfflineRequestModel.objects.get(nonce=request.nonce)  # pylint: disable=no-member

        return self._to_domain(await sync_to_async(_record)())

    async def claim(self, request: OfflineRequest) -> Optional[OfflineRequest]:
        if request.status is not OfflineRequestStatus.USED:
            raise ValueError("Only USED requests can claim a nonce")
        model = await sync_to_async(self._transition)(request)
        return self._to_domain(model) if model else None

    async def mark_rejected(self, request: OfflineRequest) -> bool:
        if request.status is not OfflineRequestStatus.REJECTED:
            raise ValueError("mark_rejected expects a REJECTED request")
        model = await sync_to_async(self._transition)(request)
        return model is not None
