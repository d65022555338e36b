"""
RenewLicenseCommand.

Command to extend a license term.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RenewLicenseCommand:
    """Command to extend a license by ``add_days`` from max(now, expiry)."""

    license_id: uuid.UUID
    add_days: int
    actor: Optional[str] = None
