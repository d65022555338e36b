"""
Unit tests for RevalidateHandler.
"""
from datetime import timedelta

import pytest

from activations.application.commands.online_activation import OnlineActivationCommand
from activations.application.commands.revalidate import RevalidateCommand
from activations.application.handlers.online_activation_handler import OnlineActivationHandler
from activations.application.handlers.revalidate_handler import RevalidateHandler
from activations.domain.events import DeviceRevalidated
from core.crypto.hashing import sha256_hex
from core.crypto.tokens import ACTIVATION_AUDIENCE, TokenSigner
from core.domain.exceptions import (
    DeviceNotActiveError,
    InvalidTokenError,
    LicenseExpiredError,
    LicenseRevokedError,
)
from core.domain.value_objects import LicenseStatus

FINGERPRINT = "machine-fingerprint-01"


@pytest.fixture
def repositories(
    license_repository, activation_repository, attempt_repository, settings_repository
):
    return {
        "license_repository": license_repository,
        "activation_repository": activation_repository,
        "attempt_repository": attempt_repository,
        "settings_repository": settings_repository,
    }


@pytest.fixture
def activate(repositories, config, event_bus, clock):
    handler = OnlineActivationHandler(config=config, event_bus=event_bus, clock=clock, **repositories)

    async def _activate(license, fingerprint=FINGERPRINT):
        result = await handler.handle(
            OnlineActivationCommand(
                license_key=license.key,
                product_id=license.product_id,
                app_version="1.0.0",
                device_fingerprint=fingerprint,
            )
        )
        return result.activation_token

    return _activate


@pytest.fixture
def handler(repositories, config, event_bus, clock):
    return RevalidateHandler(config=config, event_bus=event_bus, clock=clock, **repositories)


@pytest.mark.asyncio
class TestRevalidateHandler:
    """Tests for RevalidateHandler."""

    async def test_revalidate_issues_fresh_token(
        self, handler, activate, license, clock, activation_repository, attempt_repository, event_bus
    ):
        token = await activate(license)
        clock.advance(days=2)

        result = await handler.handle(
            RevalidateCommand(
                activation_token=token,
                device_fingerprint=FINGERPRINT,
                app_version="1.1.0",
                ip="198.51.100.4",
            )
        )

        assert result.activation_token
        assert result.offline_days == 7
        activation = await activation_repository.find_by_license_and_device(
            license.id, sha256_hex(FINGERPRINT)
        )
        assert activation.last_seen_at == clock()
        assert activation.app_version == "1.1.0"
        assert attempt_repository.results == ["SUCCESS", "SUCCESS"]
        assert attempt_repository.attempts[-1].channel.value == "REVALIDATE"
        assert len(event_bus.of_type(DeviceRevalidated)) == 1

    async def test_other_fingerprint_is_not_active(
        self, handler, activate, license, attempt_repository
    ):
        token = await activate(license)
        with pytest.raises(DeviceNotActiveError):
            await handler.handle(
                RevalidateCommand(
                    activation_token=token,
                    device_fingerprint="another-machine",
                    app_version="1.0.0",
                )
            )
        assert attempt_repository.results[-1] == "ERROR"

    async def test_revoked_device_is_rejected(
        self, handler, activate, license, activation_repository, clock
    ):
        token = await activate(license)
        activation = await activation_repository.find_by_license_and_device(
            license.id, sha256_hex(FINGERPRINT)
        )
        await activation_repository.upsert(activation.revoke(clock()))

        with pytest.raises(DeviceNotActiveError):
            await handler.handle(
                RevalidateCommand(
                    activation_token=token, device_fingerprint=FINGERPRINT, app_version="1.0.0"
                )
            )

    async def test_revoked_license_is_rejected(
        self, handler, activate, license, license_repository, attempt_repository
    ):
        token = await activate(license)
        await license_repository.save(license.revoke())

        with pytest.raises(LicenseRevokedError):
            await handler.handle(
                RevalidateCommand(
                    activation_token=token, device_fingerprint=FINGERPRINT, app_version="1.0.0"
                )
            )
        assert attempt_repository.results[-1] == "REVOKED"

    async def test_expired_license_is_flipped(
        self, handler, activate, license, license_repository, clock
    ):
        token = await activate(license)
        clock.advance(days=31)

        with pytest.raises(LicenseExpiredError):
            await handler.handle(
                RevalidateCommand(
                    activation_token=token, device_fingerprint=FINGERPRINT, app_version="1.0.0"
                )
            )
        stored = await license_repository.find_by_id(license.id)
        assert stored.status is LicenseStatus.EXPIRED

    async def test_invalid_token_is_not_logged(self, handler, attempt_repository):
        with pytest.raises(InvalidTokenError):
            await handler.handle(
                RevalidateCommand(
                    activation_token="not-a-token",
                    device_fingerprint=FINGERPRINT,
                    app_version="1.0.0",
                )
            )
        assert attempt_repository.attempts == []

    async def test_token_signed_with_other_secret(self, handler, activate, license, config):
        await activate(license)
        forged = TokenSigner(
            "some-other-secret-0123456789abcdefghij", config.token_issuer, ACTIVATION_AUDIENCE
        ).sign(
            {"licenseId": str(license.id)}, ttl=timedelta(minutes=5)
        )
        with pytest.raises(InvalidTokenError):
            await handler.handle(
                RevalidateCommand(
                    activation_token=forged, device_fingerprint=FINGERPRINT, app_version="1.0.0"
                )
            )

    async def test_picks_up_new_setting(self, handler, activate, license, settings_repository):
        token = await activate(license)
        settings_repository.values["revalidation"] = {"offlineDays": 21}

        result = await handler.handle(
            RevalidateCommand(
                activation_token=token, device_fingerprint=FINGERPRINT, app_version="1.0.0"
            )
        )
        assert result.offline_days == 21
