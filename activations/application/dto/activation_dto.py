"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from activations.domain.activation import DeviceActivation
from activations.domain.services import IssuedActivationToken


@dataclass
class ActivationTokenDTO:
    """DTO for online activation and revalidation responses."""

    activation_token: str
    offline_days: int
    expiry: str

    @classmethod
    def from_issued(cls, issued: IssuedActivationToken) -> "ActivationTokenDTO":
        return cls(
            activation_token=issued.token,
            offline_days=issued.offline_days,
            expiry=issued.expiry,
        )


@dataclass
class DeviceActivationDTO:
    """DTO for a device activation row."""

    id: uuid.UUID
    license_id: uuid.UUID
    device_id_hash: str
    app_version: Optional[str]
    activated_at: datetime
    last_seen_at: datetime
    revoked_at: Optional[datetime]
    is_active: bool

    @classmethod
    def from_entity(cls, activation: DeviceActivation) -> "DeviceActivationDTO":
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            device_id_hash=activation.device_id_hash,
            app_version=activation.app_version,
            activated_at=activation.activated_at,
            last_seen_at=activation.last_seen_at,
            revoked_at=activation.revoked_at,
            is_active=activation.is_active,
        )


@dataclass
class ActivationStatsDTO:
    """DTO for the operator stats view."""

    active_licenses: int
    suspended_licenses: int
    expired_licenses: int
    revoked_licenses: int
    active_devices: int
    unused_vouchers: int
    used_vouchers: int
