"""
Unit tests for License domain entity.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.domain.license_key import UNAMBIGUOUS_ALPHABET, generate_license_key


def _license(**overrides):
    values = {"key": "DEMOAPP-FULL-ABCD-EFGH", "tenant_id": uuid.uuid4(), "product_id": uuid.uuid4()}
    values.update(overrides)
    return License.create(**values)


class TestLicenseEntity:
    """Tests for License domain entity."""

    def test_create_license_defaults(self):
        license = _license()

        assert license.status is LicenseStatus.ACTIVE
        assert license.max_devices == 1
        assert license.max_activations == 1
        assert license.offline_allowed is False
        assert license.expires_at is None

    @pytest.mark.parametrize(
        "overrides",
        [{"key": " "}, {"max_devices": 0}, {"max_activations": 0}, {"revalidate_days": 0}],
    )
    def test_invalid_license(self, overrides):
        with pytest.raises(ValueError):
            _license(**overrides)

    def test_perpetual_never_expires(self):
        assert not _license().is_expired(datetime(2999, 1, 1, tzinfo=timezone.utc))

    def test_is_usable(self):
        now = datetime.now(timezone.utc)
        license = _license(expires_at=now + timedelta(days=1))

        assert license.is_usable(now)
        assert not license.is_usable(now + timedelta(days=2))
        assert not license.suspend().is_usable(now)

    def test_resume_requires_suspended(self):
        with pytest.raises(InvalidLicenseStatusError):
            _license().resume()
        assert _license().suspend().resume().status is LicenseStatus.ACTIVE

    def test_revoked_is_terminal(self):
        revoked = _license().revoke()
        for status in LicenseStatus:
            assert not revoked.can_transition_to(status)
        with pytest.raises(InvalidLicenseStatusError):
            revoked.renew(10)

    def test_expired_cannot_be_suspended(self):
        with pytest.raises(InvalidLicenseStatusError):
            _license().transition_to(LicenseStatus.EXPIRED).suspend()


class TestRenew:
    def test_renew_extends_from_future_expiry(self):
        now = datetime.now(timezone.utc)
        license = _license(expires_at=now + timedelta(days=10))

        renewed = license.renew(30, now)

        assert renewed.expires_at == now + timedelta(days=40)

    def test_renew_expired_starts_from_now_and_reactivates(self):
        now = datetime.now(timezone.utc)
        license = _license(expires_at=now - timedelta(days=10)).transition_to(LicenseStatus.EXPIRED)

        renewed = license.renew(30, now)

        assert renewed.expires_at == now + timedelta(days=30)
        assert renewed.status is LicenseStatus.ACTIVE

    def test_renew_keeps_suspension(self):
        now = datetime.now(timezone.utc)
        renewed = _license().suspend().renew(5, now)
        assert renewed.status is LicenseStatus.SUSPENDED

    @pytest.mark.parametrize("days", [0, 3651])
    def test_renew_range(self, days):
        with pytest.raises(ValueError):
            _license().renew(days)


class TestLicenseKey:
    def test_format(self):
        key = generate_license_key("demo-app", "FULL")
        prefix, kind, first, second = key.split("-")

        assert (prefix, kind) == ("DEMOAPP", "FULL")
        assert len(first) == len(second) == 4
        assert all(char in UNAMBIGUOUS_ALPHABET for char in first + second)
