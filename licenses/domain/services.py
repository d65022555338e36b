"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
import uuid
from typing import Optional

from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.exceptions import (
    LicenseExpiredError,
    LicenseNotFoundError,
    VersionBlockedError,
    status_error,
)
from core.domain.value_objects import LicenseStatus
from core.domain.versions import version_gte, version_lte
from core.metrics import licenses_expired_total
from licenses.domain.events import LicenseExpired
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class LicenseRegistry:
    """
    Authoritative access to licenses.

    Wraps the repository with lookup errors, status transitions and the
    lazy expiry check every activation path goes through.
    """

    def __init__(
        self,
        license_repository: LicenseRepository,
        clock: Clock = utcnow,
        event_bus: Optional[EventBus] = None,
    ):
        self.license_repository = license_repository
        self.clock = clock
        self.event_bus = event_bus

    async def find_by_key_and_product(self, key: str, product_id: uuid.UUID) -> License:
        """
        Raises:
            LicenseNotFoundError: If no license has ``key`` for ``product_id``
        """
        license = await self.license_repository.find_by_key_and_product(key.strip(), product_id)
        if not license:
            raise LicenseNotFoundError()
        return license

    async def find_by_id(self, license_id: uuid.UUID) -> License:
        """
        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        license = await self.license_repository.find_by_id(license_id)
        if not license:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license

    async def transition(self, license_id: uuid.UUID, new_status: LicenseStatus) -> License:
        """
        Move a license to ``new_status``.

        Raises:
            LicenseNotFoundError: If the license does not exist
            InvalidLicenseStatusError: If the transition is not allowed
        """
        license = await self.find_by_id(license_id)
        return await self.license_repository.save(license.transition_to(new_status))

    async def extend_expiry(self, license_id: uuid.UUID, add_days: int) -> License:
        """
        Extend a license to ``max(now, expiry) + add_days``.

        Raises:
            LicenseNotFoundError: If the license does not exist
            InvalidLicenseStatusError: If the license is revoked
        """
        license = await self.find_by_id(license_id)
        return await self.license_repository.save(license.renew(add_days, self.clock()))

    async def ensure_active(self, license: License) -> License:
        """
        Check that ``license`` currently authorizes use.

        An ACTIVE license past its expiry is flipped to EXPIRED first. The
        flip is conditional on the stored status still being ACTIVE, so
        concurrent or repeated reads record it only once.

        Returns:
            The license, unchanged

        Raises:
            LicenseExpiredError, LicenseSuspendedError, LicenseRevokedError
        """
        if license.is_usable(self.clock()):
            return license
        if license.status is LicenseStatus.ACTIVE:
            await self.expire(license)
            raise LicenseExpiredError()
        raise status_error(license.status)

    async def expire(self, license: License, source: str = "activation") -> bool:
        """
        Flip an ACTIVE license to EXPIRED.

        Returns:
            True if this call performed the flip
        """
        flipped = await self.license_repository.update_status(
            license.id, LicenseStatus.EXPIRED, expected_status=LicenseStatus.ACTIVE
        )
        if flipped:
            logger.info(
                "License %s expired at %s",
                license.id,
                license.expires_at,
                extra={"license_id": str(license.id), "source": source},
            )
            licenses_expired_total.labels(source=source).inc()
            if self.event_bus:
                await self.event_bus.publish(LicenseExpired(license_id=license.id))
        return flipped


class VersionPolicy:
    """Domain service for client version gating."""

    @staticmethod
    def check(license: License, app_version: str) -> None:
        """
        Check ``app_version`` against the license's allowed window.

        Unparseable versions satisfy any bound.

        Raises:
            VersionBlockedError: If the version is below the minimum or above the maximum
        """
        if license.allowed_version_min and not version_gte(
            app_version, license.allowed_version_min
        ):
            raise VersionBlockedError(detail=f"Minimum: {license.allowed_version_min}")
        if license.allowed_version_max and not version_lte(
            app_version, license.allowed_version_max
        ):
            raise VersionBlockedError(detail=f"Maximum: {license.allowed_version_max}")
