"""
Integration tests for management commands.
"""

from datetime import datetime, timedelta, timezone
from io import StringIO

import pytest
from asgiref.sync import async_to_sync
from django.core.management import call_command
from django.core.management.base import CommandError

from activations.domain.activation import DeviceActivation
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from core.config import ActivationConfig
from core.crypto.hashing import sha256_hex
from core.domain.value_objects import LicenseStatus
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from tests.factories import make_license


@pytest.mark.django_db
@pytest.mark.integration
class TestCheckLicenseExpirations:
    def _lapsed(self, db_product, db_tenant):
        license = make_license(
            db_product.id, db_tenant.id, expires_at=datetime.now(timezone.utc) - timedelta(days=2)
        )
        return async_to_sync(DjangoLicenseRepository().save)(license)

    def test_sweep(self, db_product, db_tenant, db_license):
        lapsed = self._lapsed(db_product, db_tenant)
        out = StringIO()

        call_command("check_license_expirations", stdout=out)

        repository = DjangoLicenseRepository()
        assert async_to_sync(repository.find_by_id)(lapsed.id).status is LicenseStatus.EXPIRED
        assert async_to_sync(repository.find_by_id)(db_license.id).status is LicenseStatus.ACTIVE
        assert "marked 1 license(s)" in out.getvalue()

    def test_dry_run(self, db_product, db_tenant):
        lapsed = self._lapsed(db_product, db_tenant)
        out = StringIO()

        call_command("check_license_expirations", "--dry-run", stdout=out)

        stored = async_to_sync(DjangoLicenseRepository().find_by_id)(lapsed.id)
        assert stored.status is LicenseStatus.ACTIVE
        assert "Found 1 expired license(s)" in out.getvalue()


@pytest.mark.django_db
@pytest.mark.integration
class TestReconcileDeviceLimits:
    def test_revokes_surplus(self, db_license):
        repository = DjangoDeviceActivationRepository()
        now = datetime.now(timezone.utc)
        for n in range(db_license.max_devices + 1):
            async_to_sync(repository.upsert)(
                DeviceActivation.create(
                    db_license.id, sha256_hex(f"machine-{n}"), now=now + timedelta(seconds=n)
                )
            )
        out = StringIO()

        call_command("reconcile_device_limits", stdout=out)

        assert async_to_sync(repository.count_active_by_license)(db_license.id) == (
            db_license.max_devices
        )
        newest = async_to_sync(repository.find_by_license_and_device)(
            db_license.id, sha256_hex(f"machine-{db_license.max_devices}")
        )
        assert newest.is_active is False
        assert "Revoked 1 surplus device(s)" in out.getvalue()

    def test_nothing_to_do(self, db_license):
        out = StringIO()
        call_command("reconcile_device_limits", "--dry-run", stdout=out)
        assert "Found 0 license(s)" in out.getvalue()


class TestIssueOperatorToken:
    def test_issues_verifiable_token(self):
        out = StringIO()

        call_command(
            "issue_operator_token",
            "--subject",
            "ops-bot",
            "--permission",
            "stats:read",
            "--permission",
            "vouchers:write",
            stdout=out,
        )

        claims = ActivationConfig.from_settings().access_token_signer().verify(out.getvalue().strip())
        assert claims["sub"] == "ops-bot"
        assert claims["permissions"] == ["stats:read", "vouchers:write"]

    def test_requires_permission(self):
        with pytest.raises(CommandError):
            call_command("issue_operator_token", "--subject", "ops-bot")
