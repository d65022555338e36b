"""
Activation token claims.

The claim set is fixed; only ``modules`` and ``features`` are open-ended
maps, since they mirror the license's own entitlement maps.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict

from core.domain.exceptions import InvalidTokenError


@dataclass(frozen=True)
class ActivationClaims:
    """Application claims carried by an activation token."""

    license_id: uuid.UUID
    tenant_id: uuid.UUID
    product_id: uuid.UUID
    device_id_hash: str
    license_type: str
    license_status: str
    expiry: str
    issued_at: str
    offline_days: int
    modules: Dict[str, bool] = field(default_factory=dict)
    features: Dict[str, Any] = field(default_factory=dict)

    def to_claims(self) -> Dict[str, Any]:
        """Render as the camelCase claim names clients read."""
        return {
            "licenseId": str(self.license_id),
            "tenantId": str(self.tenant_id),
            "productId": str(self.product_id),
            "deviceIdHash": self.device_id_hash,
            "modules": self.modules,
            "features": self.features,
            "licenseType": self.license_type,
            "licenseStatus": self.license_status,
            "expiry": self.expiry,
            "issuedAt": self.issued_at,
            "offlineDays": self.offline_days,
        }

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "ActivationClaims":
        """
        Parse verified token claims.

        Raises:
            InvalidTokenError: If a required claim is missing or malformed
        """
        try:
            return cls(
                license_id=uuid.UUID(str(claims["licenseId"])),
                tenant_id=uuid.UUID(str(claims["tenantId"])),
                product_id=uuid.UUID(str(claims["productId"])),
                device_id_hash=str(claims["deviceIdHash"]),
                license_type=str(claims.get("licenseType", "")),
                license_status=str(claims.get("licenseStatus", "")),
                expiry=str(claims.get("expiry", "")),
                issued_at=str(claims.get("issuedAt", "")),
                offline_days=int(claims.get("offlineDays", 0)),
                modules=dict(claims.get("modules") or {}),
                features=dict(claims.get("features") or {}),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError("Token claims are malformed") from exc
