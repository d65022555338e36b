"""
Activation domain services.

Domain services for device admission, token issuance and device limit
reconciliation.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from activations.domain.activation import DeviceActivation
from activations.domain.claims import ActivationClaims
from activations.ports.activation_repository import DeviceActivationRepository
from core.config import ActivationConfig
from core.crypto.canonical import to_iso8601
from core.crypto.tokens import TokenSigner
from core.domain.clock import Clock, utcnow
from core.domain.exceptions import DeviceLimitExceededError, DeviceNotActiveError
from core.ports.settings_repository import SettingsRepository
from licenses.domain.license import License

logger = logging.getLogger(__name__)


class DeviceActivationTracker:
    """
    Enforces per-license device caps.

    ``max_devices`` bounds concurrently active devices and
    ``max_activations`` bounds devices ever activated. Only devices never
    seen before are checked against the caps; a known device may always
    re-activate, which also clears a previous revocation.

    Counting and writing are separate statements, so concurrent first
    activations of distinct devices can briefly over-admit. The unique
    (license, device) key keeps rows from duplicating, and the
    ``reconcile_device_limits`` command trims surplus devices.
    """

    def __init__(self, activation_repository: DeviceActivationRepository, clock: Clock = utcnow):
        self.activation_repository = activation_repository
        self.clock = clock

    async def admit(
        self,
        license: License,
        device_id_hash: str,
        app_version: Optional[str],
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> DeviceActivation:
        """
        Admit a device onto a license and record the sighting.

        Raises:
            DeviceLimitExceededError: If a new device would exceed either cap
        """
        existing, active_count, total_count = await asyncio.gather(
            self.activation_repository.find_by_license_and_device(license.id, device_id_hash),
            self.activation_repository.count_active_by_license(license.id),
            self.activation_repository.count_by_license(license.id),
        )

        now = self.clock()
        if existing is None:
            if active_count >= license.max_devices:
                raise DeviceLimitExceededError("Device limit reached")
            if total_count >= license.max_activations:
                raise DeviceLimitExceededError("Activation limit reached")
            activation = DeviceActivation.create(
                license_id=license.id,
                device_id_hash=device_id_hash,
                app_version=app_version,
                ip=ip,
                user_agent=user_agent,
                now=now,
            )
        else:
            activation = existing.touch(app_version, ip=ip, user_agent=user_agent, now=now)

        return await self.activation_repository.upsert(activation)

    async def require_active(self, license_id: uuid.UUID, device_id_hash: str) -> DeviceActivation:
        """
        Raises:
            DeviceNotActiveError: If the device has no row or is revoked
        """
        existing = await self.activation_repository.find_by_license_and_device(
            license_id, device_id_hash
        )
        if existing is None or not existing.is_active:
            raise DeviceNotActiveError()
        return existing

    async def touch(
        self,
        activation: DeviceActivation,
        app_version: Optional[str],
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> DeviceActivation:
        """
        Record a sighting of an already admitted device.

        Unlike ``admit`` this never clears a revocation; a device revoked
        after ``require_active`` stays revoked.

        Raises:
            DeviceNotActiveError: If the device was revoked in the meantime
        """
        touched = activation.touch(app_version, ip=ip, user_agent=user_agent, now=self.clock())
        if not await self.activation_repository.touch(touched):
            raise DeviceNotActiveError()
        return touched


@dataclass(frozen=True)
class IssuedActivationToken:
    """An activation token together with the window it grants."""

    token: str
    offline_days: int
    expires_at: datetime
    claims: ActivationClaims

    @property
    def expiry(self) -> str:
        return to_iso8601(self.expires_at)


class ActivationTokenIssuer:
    """
    Issues activation tokens.

    The revalidation window is the license's own ``revalidate_days``, else
    the stored ``revalidation`` setting, else the configured default.
    """

    def __init__(
        self,
        config: ActivationConfig,
        settings_repository: SettingsRepository,
        signer: Optional[TokenSigner] = None,
        clock: Clock = utcnow,
    ):
        self.config = config
        self.settings_repository = settings_repository
        self.signer = signer or config.activation_token_signer()
        self.clock = clock

    async def resolve_ttl_days(self, license: License) -> int:
        if license.revalidate_days:
            return license.revalidate_days
        setting = await self.settings_repository.get_revalidation()
        return setting.offline_days or self.config.offline_days

    async def issue(self, license: License, device_id_hash: str) -> IssuedActivationToken:
        """
        Issue a token for ``device_id_hash`` on ``license``.

        Returns:
            IssuedActivationToken
        """
        now = self.clock()
        ttl_days = await self.resolve_ttl_days(license)
        expires_at = license.expires_at or now + timedelta(days=ttl_days)

        claims = ActivationClaims(
            license_id=license.id,
            tenant_id=license.tenant_id,
            product_id=license.product_id,
            device_id_hash=device_id_hash,
            license_type=license.license_type.value,
            license_status=license.status.value,
            expiry=to_iso8601(expires_at),
            issued_at=to_iso8601(now),
            offline_days=ttl_days,
            modules=license.modules,
            features=license.features,
        )
        ttl = self.config.token_ttl_activation or timedelta(days=ttl_days)
        token = self.signer.sign(claims.to_claims(), ttl=ttl, now=now)
        return IssuedActivationToken(
            token=token, offline_days=ttl_days, expires_at=expires_at, claims=claims
        )

    def read(self, token: str) -> ActivationClaims:
        """
        Verify a token and parse its claims.

        Raises:
            InvalidTokenError: If the token does not verify
        """
        return ActivationClaims.from_claims(self.signer.verify(token))


class DeviceLimitReconciler:
    """Revokes the newest surplus active devices of over-admitted licenses."""

    def __init__(self, activation_repository: DeviceActivationRepository, clock: Clock = utcnow):
        self.activation_repository = activation_repository
        self.clock = clock

    async def surplus(self, license: License) -> List[DeviceActivation]:
        """Active devices beyond ``max_devices``, newest first."""
        active = await self.activation_repository.find_active_by_license(license.id)
        if len(active) <= license.max_devices:
            return []
        return sorted(active, key=lambda a: a.activated_at)[license.max_devices:][::-1]

    async def reconcile(self, license: License) -> List[DeviceActivation]:
        """
        Revoke surplus devices of ``license``.

        Returns:
            The revoked activations
        """
        revoked = []
        now = self.clock()
        for activation in await self.surplus(license):
            revoked.append(await self.activation_repository.upsert(activation.revoke(now)))
            logger.warning(
                "Revoked surplus device %s on license %s",
                activation.device_id_hash[:12],
                license.id,
            )
        return revoked
