"""
Tenant domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from core.domain.value_objects import Email


class TenantStatus(Enum):
    """Tenant status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tenant:
    """A customer organisation owning licenses."""

    id: uuid.UUID
    trade_name: str
    legal_name: Optional[str]
    contact_email: Optional[Email]
    contact_phone: Optional[str]
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        if not self.trade_name or not self.trade_name.strip():
            raise ValueError("Tenant trade name is required")

    @classmethod
    def create(
        cls,
        trade_name: str,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        legal_name: Optional[str] = None,
        tenant_id: Optional[uuid.UUID] = None,
    ) -> "Tenant":
        """
        Create a new active Tenant. The legal name defaults to the trade name.
        """
        now = datetime.now(timezone.utc)
        trade_name = trade_name.strip()
        return cls(
            id=tenant_id or uuid.uuid4(),
            trade_name=trade_name,
            legal_name=legal_name or trade_name,
            contact_email=Email(contact_email) if contact_email else None,
            contact_phone=contact_phone or None,
            status=TenantStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
