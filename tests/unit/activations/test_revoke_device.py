"""
Unit tests for RevokeDeviceHandler and ActivationStatsHandler.
"""
import pytest

from activations.application.commands.revoke_device import RevokeDeviceCommand
from activations.application.handlers.activation_stats_handler import ActivationStatsHandler
from activations.application.handlers.revoke_device_handler import RevokeDeviceHandler
from activations.domain.activation import DeviceActivation
from activations.domain.events import DeviceRevoked
from core.crypto.hashing import sha256_hex
from core.domain.exceptions import ActivationNotFoundError
from tests.factories import make_license
from vouchers.domain.voucher import LicenseTemplate, Voucher


@pytest.fixture
def handler(activation_repository, event_bus, clock):
    return RevokeDeviceHandler(activation_repository, event_bus=event_bus, clock=clock)


@pytest.mark.asyncio
class TestRevokeDeviceHandler:
    async def test_revoke_active_device(self, handler, activation_repository, license, event_bus, clock):
        device = sha256_hex("laptop")
        activation_repository.add(DeviceActivation.create(license.id, device, now=clock()))

        result = await handler.handle(
            RevokeDeviceCommand(license_id=license.id, device_id_hash=device, actor="ops@test")
        )

        assert result.is_active is False
        assert result.revoked_at == clock()
        assert await activation_repository.count_active_by_license(license.id) == 0
        events = event_bus.of_type(DeviceRevoked)
        assert len(events) == 1
        assert events[0].actor == "ops@test"

    async def test_revoke_twice_is_noop(self, handler, activation_repository, license, event_bus, clock):
        device = sha256_hex("laptop")
        activation_repository.add(DeviceActivation.create(license.id, device, now=clock()))
        command = RevokeDeviceCommand(license_id=license.id, device_id_hash=device)

        first = await handler.handle(command)
        clock.advance(hours=1)
        second = await handler.handle(command)

        assert second.revoked_at == first.revoked_at
        assert len(event_bus.events) == 1

    async def test_unknown_device(self, handler, license):
        with pytest.raises(ActivationNotFoundError):
            await handler.handle(
                RevokeDeviceCommand(license_id=license.id, device_id_hash=sha256_hex("nope"))
            )


@pytest.mark.asyncio
class TestActivationStatsHandler:
    async def test_counts(
        self,
        license_repository,
        activation_repository,
        voucher_repository,
        product,
        license,
        clock,
    ):
        suspended = make_license(product.id)
        license_repository.add(suspended.suspend())
        activation_repository.add(DeviceActivation.create(license.id, sha256_hex("a"), now=clock()))
        revoked = DeviceActivation.create(license.id, sha256_hex("b"), now=clock())
        activation_repository.add(revoked.revoke(clock()))
        voucher_repository.add(
            Voucher.create(
                code="ABCD-EFGH-JKLM",
                product_id=product.id,
                template=LicenseTemplate(),
                created_by="ops@test",
            )
        )

        stats = await ActivationStatsHandler(
            license_repository, activation_repository, voucher_repository
        ).handle()

        assert stats.active_licenses == 1
        assert stats.suspended_licenses == 1
        assert stats.expired_licenses == 0
        assert stats.active_devices == 1
        assert stats.unused_vouchers == 1
        assert stats.used_vouchers == 0

    async def test_empty(self, license_repository, activation_repository, voucher_repository):
        stats = await ActivationStatsHandler(
            license_repository, activation_repository, voucher_repository
        ).handle()
        assert stats.active_licenses == 0
        assert stats.active_devices == 0
