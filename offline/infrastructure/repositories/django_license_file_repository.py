"""
Django implementation of OfflineLicenseFileRepository port.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from offline.domain.license_file import OfflineLicenseFile
from offline.infrastructure.models import OfflineLicenseFile as OfflineLicenseFileModel
from offline.ports.license_file_repository import OfflineLicenseFileRepository


class DjangoOfflineLicenseFileRepository(OfflineLicenseFileRepository):
    """Django ORM implementation of OfflineLicenseFileRepository."""

    def _to_domain(self, model: OfflineLicenseFileModel) -> OfflineLicenseFile:
        return OfflineLicenseFile(
            id=model.id,
            offline_request_id=model.offline_request_id,
            license_id=model.license_id,
            file_name=model.file_name,
            payload=model.payload,
            signature_ed25519=model.signature_ed25519,
            public_key_ed25519=model.public_key_ed25519,
            created_by=model.created_by,
            created_at=model.created_at,
        )

    async def save(self, license_file: OfflineLicenseFile) -> OfflineLicenseFile:
        # pylint: disable=no-member
        model = await sync_to_async(OfflineLicenseFileModel.objects.create)(
            id=license_file.id,
            offline_request_id=license_file.offline_request_id,
            license_id=license_file.license_id,
            file_name=license_file.file_name,
            payload=license_file.payload,
            signature_ed25519=license_file.signature_ed25519,
            public_key_ed25519=license_file.public_key_ed25519,
            created_by=license_file.created_by,
            created_at=license_file.created_at,
        )
        return self._to_domain(model)

    async def find_by_id(self, file_id: uuid.UUID) -> Optional[OfflineLicenseFile]:
        # pylint: disable=no-member
        model = await sync_to_async(OfflineLicenseFileModel.objects.filter(id=file_id).first)()
        return self._to_domain(model) if model else None
