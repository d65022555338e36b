"""
Integration tests for DjangoUnitOfWork rollbacks against the database.

These run with real transactions so that the atomic block opened through
``sync_to_async`` is the one the repositories write through.
"""

import pytest
from asgiref.sync import async_to_sync

from activations.infrastructure.repositories.django_attempt_repository import (
    DjangoActivationAttemptRepository,
)
from catalog.infrastructure.models import Tenant as TenantModel
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from catalog.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository
from core.domain.exceptions import VoucherUnavailableError
from core.infrastructure.database import DjangoUnitOfWork
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from offline.application.commands.generate_license_file import GenerateLicenseFileCommand
from offline.application.handlers.generate_license_file_handler import GenerateLicenseFileHandler
from offline.infrastructure.models import OfflineLicenseFile as OfflineLicenseFileModel
from offline.infrastructure.models import OfflineRequest as OfflineRequestModel
from offline.infrastructure.repositories.django_license_file_repository import (
    DjangoOfflineLicenseFileRepository,
)
from offline.infrastructure.repositories.django_offline_request_repository import (
    DjangoOfflineRequestRepository,
)
from tests.factories import make_request_file
from tests.fakes import RecordingEventBus
from vouchers.application.commands.redeem_voucher import RedeemVoucherCommand
from vouchers.application.handlers.redeem_voucher_handler import RedeemVoucherHandler
from vouchers.domain.voucher import LicenseTemplate, Voucher, VoucherStatus
from vouchers.infrastructure.repositories.django_voucher_repository import (
    DjangoVoucherRepository,
)


class ContendedVoucherRepository(DjangoVoucherRepository):
    """Another redemption always wins the conditional update."""

    async def mark_used(self, *args, **kwargs):
        return False


class UnavailableLicenseFileRepository(DjangoOfflineLicenseFileRepository):
    async def save(self, license_file):
        raise RuntimeError("file store unavailable")


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestVoucherRedemptionRollback:
    def test_lost_race_leaves_no_tenant_or_license(self, transactional_db, db_product):
        voucher = async_to_sync(DjangoVoucherRepository().create)(
            Voucher.create(
                code="FT-RACE-RACE-RACE",
                product_id=db_product.id,
                template=LicenseTemplate(license_duration_days=30, max_devices=1),
            )
        )
        # pylint: disable=no-member
        licenses_before = LicenseModel.objects.count()
        tenants_before = TenantModel.objects.count()
        handler = RedeemVoucherHandler(
            voucher_repository=ContendedVoucherRepository(),
            product_repository=DjangoProductRepository(),
            tenant_repository=DjangoTenantRepository(),
            license_repository=DjangoLicenseRepository(),
            unit_of_work=DjangoUnitOfWork(),
            event_bus=RecordingEventBus(),
        )

        with pytest.raises(VoucherUnavailableError):
            async_to_sync(handler.handle)(
                RedeemVoucherCommand(
                    code=voucher.code, trade_name="Race Shop", contact_email="race@shop.test"
                )
            )

        assert LicenseModel.objects.count() == licenses_before
        assert TenantModel.objects.count() == tenants_before
        stored = async_to_sync(DjangoVoucherRepository().find_by_id)(voucher.id)
        assert stored.status is VoucherStatus.UNUSED


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestOfflineIssuanceRollback:
    def _handler(self, config, file_repository):
        return GenerateLicenseFileHandler(
            license_repository=DjangoLicenseRepository(),
            offline_request_repository=DjangoOfflineRequestRepository(),
            license_file_repository=file_repository,
            attempt_repository=DjangoActivationAttemptRepository(),
            config=config,
            unit_of_work=DjangoUnitOfWork(),
            event_bus=RecordingEventBus(),
        )

    def test_failed_file_write_releases_nonce(self, transactional_db, db_license, config):
        request_file = make_request_file(db_license.product_id, nonce="nonce-txn-000001")
        command = GenerateLicenseFileCommand(
            request_file=request_file, license_id=db_license.id, actor="ops@test"
        )

        with pytest.raises(RuntimeError):
            async_to_sync(
                self._handler(config, UnavailableLicenseFileRepository()).handle
            )(command)

        # pylint: disable=no-member
        assert not OfflineRequestModel.objects.filter(nonce="nonce-txn-000001").exists()

        result = async_to_sync(
            self._handler(config, DjangoOfflineLicenseFileRepository()).handle
        )(command)

        assert OfflineLicenseFileModel.objects.filter(id=result.id).exists()
        assert OfflineRequestModel.objects.get(nonce="nonce-txn-000001").status == "USED"
