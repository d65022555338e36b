"""
Offline request file.

A request file is generated by a client with no connectivity. It carries a
payload, the SHA-256 of the payload's canonical form, and optionally an
Ed25519 signature made with the product's request key.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.crypto.canonical import canonical_bytes
from core.crypto.hashing import canonical_sha256
from core.domain.clock import utcnow
from core.domain.exceptions import InvalidRequestFileError

# Only these keys take part in the checksum. Anything else a client adds is ignored.
PAYLOAD_KEYS = ("productId", "appVersion", "deviceFingerprint", "tenantName", "timestamp", "nonce")


class OfflineRequestStatus(Enum):
    """Lifecycle of an offline request nonce."""

    RECEIVED = "RECEIVED"
    USED = "USED"
    REJECTED = "REJECTED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OfflineRequestPayload:
    """Parsed request payload. ``source`` keeps the exact fields that were checksummed."""

    product_id: uuid.UUID
    app_version: str
    device_fingerprint: str
    timestamp: int
    nonce: str
    tenant_name: Optional[str] = None
    source: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OfflineRequestPayload":
        """
        Parse a client payload.

        Raises:
            InvalidRequestFileError: If a field is missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidRequestFileError(detail="Payload must be an object")
        source = {key: data[key] for key in PAYLOAD_KEYS if key in data}
        try:
            product_id = uuid.UUID(str(data["productId"]))
            app_version = str(data["appVersion"])
            fingerprint = str(data["deviceFingerprint"])
            nonce = str(data["nonce"])
            timestamp = data["timestamp"]
        except (KeyError, ValueError) as exc:
            raise InvalidRequestFileError(detail="Malformed payload") from exc

        if not app_version:
            raise InvalidRequestFileError(detail="appVersion is required")
        if len(fingerprint) < 8:
            raise InvalidRequestFileError(detail="deviceFingerprint is too short")
        if len(nonce) < 8:
            raise InvalidRequestFileError(detail="nonce is too short")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp <= 0:
            raise InvalidRequestFileError(detail="timestamp must be a positive integer")

        tenant_name = data.get("tenantName")
        return cls(
            product_id=product_id,
            app_version=app_version,
            device_fingerprint=fingerprint,
            timestamp=timestamp,
            nonce=nonce,
            tenant_name=str(tenant_name) if tenant_name is not None else None,
            source=source,
        )

    def canonical_bytes(self) -> bytes:
        return canonical_bytes(self.source)

    def checksum(self) -> str:
        return canonical_sha256(self.source)


@dataclass(frozen=True)
class RequestFile:
    """A submitted offline request file."""

    payload: OfflineRequestPayload
    checksum_sha256: str
    signature_ed25519: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequestFile":
        """
        Raises:
            InvalidRequestFileError: If the payload is malformed
        """
        return cls(
            payload=OfflineRequestPayload.from_dict(data.get("payload")),
            checksum_sha256=str(data.get("checksumSha256") or "").lower(),
            signature_ed25519=data.get("signatureEd25519") or None,
        )

    def checksum_matches(self) -> bool:
        return self.payload.checksum() == self.checksum_sha256


@dataclass(frozen=True)
class OfflineRequest:
    """
    OfflineRequest domain entity.

    The nonce is the replay anchor: it reaches USED at most once.
    """

    id: uuid.UUID
    nonce: str
    product_id: uuid.UUID
    payload: Dict[str, Any]
    payload_hash: str
    status: OfflineRequestStatus
    tenant_id: Optional[uuid.UUID] = None
    license_id: Optional[uuid.UUID] = None
    used_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_used(self) -> bool:
        return self.status is OfflineRequestStatus.USED

    @classmethod
    def create(
        cls,
        request_file: RequestFile,
        status: OfflineRequestStatus = OfflineRequestStatus.RECEIVED,
        tenant_id: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
        created_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "OfflineRequest":
        now = now or utcnow()
        return cls(
            id=uuid.uuid4(),
            nonce=request_file.payload.nonce,
            product_id=request_file.payload.product_id,
            payload=dict(request_file.payload.source),
            payload_hash=request_file.checksum_sha256,
            status=status,
            tenant_id=tenant_id,
            license_id=license_id,
            used_at=now if status is OfflineRequestStatus.USED else None,
            created_by=created_by,
            created_at=now,
        )
