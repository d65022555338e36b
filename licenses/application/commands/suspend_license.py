"""
SuspendLicenseCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class SuspendLicenseCommand:
    """Command to suspend an ACTIVE license."""

    license_id: uuid.UUID
    actor: Optional[str] = None
