"""
Integration tests for repository implementations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from activations.domain.activation import DeviceActivation
from activations.domain.attempt import ActivationAttempt, AttemptChannel, AttemptResult
from activations.domain.services import DeviceActivationTracker
from activations.infrastructure.models import ActivationAttempt as ActivationAttemptModel
from activations.infrastructure.models import DeviceActivation as DeviceActivationModel
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from activations.infrastructure.repositories.django_attempt_repository import (
    DjangoActivationAttemptRepository,
)
from catalog.domain.tenant import Tenant
from catalog.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository
from core.crypto.hashing import sha256_hex
from core.domain.exceptions import DeviceNotActiveError
from core.domain.value_objects import LicenseStatus
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from offline.domain.license_file import OfflineLicenseFile
from offline.domain.request_file import OfflineRequest, OfflineRequestStatus, RequestFile
from offline.infrastructure.repositories.django_license_file_repository import (
    DjangoOfflineLicenseFileRepository,
)
from offline.infrastructure.repositories.django_offline_request_repository import (
    DjangoOfflineRequestRepository,
)
from tests.factories import make_license, make_request_file
from vouchers.domain.voucher import LicenseTemplate, Voucher, VoucherStatus
from vouchers.infrastructure.repositories.django_voucher_repository import (
    DjangoVoucherRepository,
)


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for DjangoLicenseRepository."""

    def test_save_and_find(self, db_product, db_tenant):
        repository = DjangoLicenseRepository()
        license = make_license(
            db_product.id,
            db_tenant.id,
            modules={"reports": True},
            features={"seats": 3},
            allowed_version_min="1.0.0",
        )

        async_to_sync(repository.save)(license)
        found = async_to_sync(repository.find_by_id)(license.id)

        assert found.key == license.key
        assert found.status is LicenseStatus.ACTIVE
        assert found.modules == {"reports": True}
        assert found.features == {"seats": 3}
        assert found.allowed_version_min == "1.0.0"

    def test_find_by_key_is_scoped_to_product(self, db_license):
        repository = DjangoLicenseRepository()
        assert async_to_sync(repository.find_by_key_and_product)(
            db_license.key, db_license.product_id
        ).id == db_license.id
        assert async_to_sync(repository.find_by_key_and_product)(db_license.key, uuid.uuid4()) is None

    def test_conditional_status_update(self, db_license):
        repository = DjangoLicenseRepository()
        expire = async_to_sync(repository.update_status)

        assert expire(db_license.id, LicenseStatus.EXPIRED, expected_status=LicenseStatus.ACTIVE)
        assert not expire(db_license.id, LicenseStatus.EXPIRED, expected_status=LicenseStatus.ACTIVE)
        assert async_to_sync(repository.count_by_status)(LicenseStatus.EXPIRED) == 1

    def test_find_active_expired(self, db_product, db_tenant):
        repository = DjangoLicenseRepository()
        now = datetime.now(timezone.utc)
        stale = make_license(db_product.id, db_tenant.id, expires_at=now - timedelta(days=1))
        fresh = make_license(db_product.id, db_tenant.id, expires_at=now + timedelta(days=1))
        perpetual = make_license(db_product.id, db_tenant.id, expires_at=None)
        for license in (stale, fresh, perpetual):
            async_to_sync(repository.save)(license)

        found = async_to_sync(repository.find_active_expired)(now)

        assert [license.id for license in found] == [stale.id]


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceActivationRepository:
    """Integration tests for DjangoDeviceActivationRepository."""

    def test_upsert_keeps_one_row_per_device(self, db_license):
        repository = DjangoDeviceActivationRepository()
        device = sha256_hex("workstation-01")
        first = async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, device, "1.0.0")
        )

        again = async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, device, "1.1.0")
        )

        assert again.id == first.id
        assert again.activated_at == first.activated_at
        assert again.app_version == "1.1.0"
        assert async_to_sync(repository.count_by_license)(db_license.id) == 1

    def test_revocation_counts(self, db_license):
        repository = DjangoDeviceActivationRepository()
        kept = async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, sha256_hex("a"))
        )
        dropped = async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, sha256_hex("b"))
        )
        async_to_sync(repository.upsert)(dropped.revoke())

        assert async_to_sync(repository.count_active_by_license)(db_license.id) == 1
        assert async_to_sync(repository.count_by_license)(db_license.id) == 2
        active = async_to_sync(repository.find_active_by_license)(db_license.id)
        assert [a.id for a in active] == [kept.id]
        assert async_to_sync(repository.count_active)() == 1

    def test_touch_updates_active_row(self, db_license):
        repository = DjangoDeviceActivationRepository()
        stored = async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, sha256_hex("a"), "1.0.0")
        )
        later = datetime.now(timezone.utc) + timedelta(minutes=5)

        assert async_to_sync(repository.touch)(stored.touch("1.0.1", now=later))

        row = DeviceActivationModel.objects.get(id=stored.id)  # pylint: disable=no-member
        assert row.app_version == "1.0.1"
        assert row.last_seen_at == later

    def test_revalidation_touch_does_not_undo_revoke(self, db_license):
        tracker = DeviceActivationTracker(DjangoDeviceActivationRepository())
        device = sha256_hex("workstation-02")
        async_to_sync(tracker.admit)(db_license, device, "1.0.0")
        active = async_to_sync(tracker.require_active)(db_license.id, device)
        # pylint: disable=no-member
        DeviceActivationModel.objects.filter(id=active.id).update(
            revoked_at=datetime.now(timezone.utc)
        )

        with pytest.raises(DeviceNotActiveError):
            async_to_sync(tracker.touch)(active, "1.0.1")

        row = DeviceActivationModel.objects.get(id=active.id)
        assert row.revoked_at is not None
        assert row.app_version == "1.0.0"


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationAttemptRepository:
    def test_add(self, db_license):
        attempt = ActivationAttempt.create(
            AttemptChannel.ONLINE,
            AttemptResult.DEVICE_LIMIT,
            product_id=db_license.product_id,
            license_id=db_license.id,
            license_key=db_license.key,
            ip="203.0.113.9",
            reason="Device limit reached",
        )

        async_to_sync(DjangoActivationAttemptRepository().add)(attempt)

        stored = ActivationAttemptModel.objects.get(id=attempt.id)  # pylint: disable=no-member
        assert stored.result == "DEVICE_LIMIT"
        assert stored.channel == "ONLINE"


@pytest.mark.django_db
@pytest.mark.integration
class TestOfflineRequestRepository:
    """Integration tests for the nonce store."""

    def _request(self, product_id, status, license=None, nonce="nonce-integration-01"):
        request_file = RequestFile.from_dict(make_request_file(product_id, nonce=nonce))
        return OfflineRequest.create(
            request_file,
            status=status,
            tenant_id=license.tenant_id if license else None,
            license_id=license.id if license else None,
        )

    def test_claim_once(self, db_license):
        repository = DjangoOfflineRequestRepository()
        used = self._request(db_license.product_id, OfflineRequestStatus.USED, db_license)

        claimed = async_to_sync(repository.claim)(used)
        assert claimed.status is OfflineRequestStatus.USED
        assert claimed.license_id == db_license.id

        assert async_to_sync(repository.claim)(used) is None

    def test_received_then_claimed(self, db_license):
        repository = DjangoOfflineRequestRepository()
        received = self._request(db_license.product_id, OfflineRequestStatus.RECEIVED)
        stored = async_to_sync(repository.record_received)(received)
        again = async_to_sync(repository.record_received)(received)
        assert again.id == stored.id

        claimed = async_to_sync(repository.claim)(
            self._request(db_license.product_id, OfflineRequestStatus.USED, db_license)
        )
        assert claimed.id == stored.id

    def test_rejection_never_overwrites_used(self, db_license):
        repository = DjangoOfflineRequestRepository()
        async_to_sync(repository.claim)(
            self._request(db_license.product_id, OfflineRequestStatus.USED, db_license)
        )

        rejected = async_to_sync(repository.mark_rejected)(
            self._request(db_license.product_id, OfflineRequestStatus.REJECTED, db_license)
        )

        assert rejected is False
        stored = async_to_sync(repository.find_by_nonce)("nonce-integration-01")
        assert stored.status is OfflineRequestStatus.USED

    def test_license_file_roundtrip(self, db_license):
        claimed = async_to_sync(DjangoOfflineRequestRepository().claim)(
            self._request(db_license.product_id, OfflineRequestStatus.USED, db_license)
        )
        repository = DjangoOfflineLicenseFileRepository()
        license_file = OfflineLicenseFile.create(
            offline_request_id=claimed.id,
            license_id=db_license.id,
            nonce=claimed.nonce,
            payload={"licenseId": str(db_license.id)},
            signature_ed25519="c2ln",
            public_key_ed25519="a2V5",
            created_by="ops@test",
        )

        async_to_sync(repository.save)(license_file)
        found = async_to_sync(repository.find_by_id)(license_file.id)

        assert found.file_name == f"license-{db_license.id}-nonce-integration-01.json"
        assert found.payload == {"licenseId": str(db_license.id)}
        assert async_to_sync(repository.find_by_id)(uuid.uuid4()) is None


@pytest.mark.django_db
@pytest.mark.integration
class TestVoucherRepository:
    """Integration tests for DjangoVoucherRepository."""

    def _voucher(self, product_id, code="FT-ABCD-EFGH-JKMN"):
        template = LicenseTemplate(license_duration_days=30, max_devices=2, modules={"pos": True})
        return Voucher.create(code=code, product_id=product_id, template=template, batch_name="b1")

    def test_create_and_find(self, db_product):
        repository = DjangoVoucherRepository()
        voucher = async_to_sync(repository.create)(self._voucher(db_product.id))

        found = async_to_sync(repository.find_by_code)("FT-ABCD-EFGH-JKMN")

        assert found.id == voucher.id
        assert found.template.max_devices == 2
        assert found.template.modules == {"pos": True}
        assert found.status is VoucherStatus.UNUSED

    def test_mark_used_once(self, db_license):
        repository = DjangoVoucherRepository()
        voucher = async_to_sync(repository.create)(self._voucher(db_license.product_id))
        now = datetime.now(timezone.utc)
        mark_used = async_to_sync(repository.mark_used)

        assert mark_used(voucher.id, db_license.tenant_id, db_license.id, "a@b.test", now)
        assert not mark_used(voucher.id, db_license.tenant_id, db_license.id, "c@d.test", now)

        stored = async_to_sync(repository.find_by_id)(voucher.id)
        assert stored.status is VoucherStatus.USED
        assert stored.used_by_email == "a@b.test"
        assert not async_to_sync(repository.cancel)(voucher.id)


@pytest.mark.django_db
@pytest.mark.integration
class TestTenantRepository:
    def test_find_by_contact_email_ignores_case(self):
        repository = DjangoTenantRepository()
        tenant = async_to_sync(repository.save)(
            Tenant.create(trade_name="Padaria", contact_email="dono@padaria.test")
        )
        found = async_to_sync(repository.find_by_contact_email)("DONO@Padaria.test")
        assert found.id == tenant.id
