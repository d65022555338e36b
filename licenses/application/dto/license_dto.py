"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class LicenseStatusDTO:
    """DTO for a license after an administrative status change."""

    id: uuid.UUID
    key: str
    status: str
    expires_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseStatusDTO":
        return cls(
            id=license.id,
            key=license.key,
            status=license.status.value,
            expires_at=license.expires_at,
            updated_at=license.updated_at,
        )
