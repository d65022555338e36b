"""
OfflineLicenseFile domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.clock import utcnow


def license_file_name(license_id: uuid.UUID, nonce: str) -> str:
    return f"license-{license_id}-{nonce}.json"


@dataclass(frozen=True)
class OfflineLicenseFile:
    """
    A signed license file issued for one offline request. Immutable.

    ``payload`` is the exact claim set that was canonicalized and signed.
    """

    id: uuid.UUID
    offline_request_id: uuid.UUID
    license_id: uuid.UUID
    file_name: str
    payload: Dict[str, Any]
    signature_ed25519: str
    public_key_ed25519: str
    created_by: Optional[str]
    created_at: datetime

    @classmethod
    def create(
        cls,
        offline_request_id: uuid.UUID,
        license_id: uuid.UUID,
        nonce: str,
        payload: Dict[str, Any],
        signature_ed25519: str,
        public_key_ed25519: str,
        created_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "OfflineLicenseFile":
        return cls(
            id=uuid.uuid4(),
            offline_request_id=offline_request_id,
            license_id=license_id,
            file_name=license_file_name(license_id, nonce),
            payload=payload,
            signature_ed25519=signature_ed25519,
            public_key_ed25519=public_key_ed25519,
            created_by=created_by,
            created_at=now or utcnow(),
        )

    def artifact(self) -> Dict[str, Any]:
        """The downloadable file body clients verify on their own."""
        return {
            "payload": self.payload,
            "signatureEd25519": self.signature_ed25519,
            "publicKeyEd25519": self.public_key_ed25519,
        }
