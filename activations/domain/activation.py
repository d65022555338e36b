"""
DeviceActivation domain entity.

One row per (license, device). A device is active while ``revoked_at`` is unset.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.clock import utcnow


@dataclass(frozen=True)
class DeviceActivation:
    """
    DeviceActivation domain entity.

    ``device_id_hash`` is the SHA-256 of the client fingerprint; the raw
    fingerprint is never stored.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    device_id_hash: str
    app_version: Optional[str]
    activated_at: datetime
    last_seen_at: datetime
    revoked_at: Optional[datetime] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if not self.device_id_hash or len(self.device_id_hash) != 64:
            raise ValueError("Device id hash must be a SHA-256 hex digest")

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        device_id_hash: str,
        app_version: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "DeviceActivation":
        """
        Create the activation for a device seen for the first time.

        Returns:
            DeviceActivation entity instance
        """
        now = now or utcnow()
        return cls(
            id=uuid.uuid4(),
            license_id=license_id,
            device_id_hash=device_id_hash,
            app_version=app_version,
            activated_at=now,
            last_seen_at=now,
            ip=ip,
            user_agent=user_agent,
        )

    def touch(
        self,
        app_version: Optional[str],
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "DeviceActivation":
        """Record a new sighting of the device and clear any revocation."""
        return replace(
            self,
            app_version=app_version or self.app_version,
            last_seen_at=now or utcnow(),
            revoked_at=None,
            ip=ip or self.ip,
            user_agent=user_agent or self.user_agent,
        )

    def revoke(self, now: Optional[datetime] = None) -> "DeviceActivation":
        """Soft-revoke the device. Already revoked devices keep their timestamp."""
        if self.revoked_at is not None:
            return self
        return replace(self, revoked_at=now or utcnow())
