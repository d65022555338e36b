"""
RevokeLicenseCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RevokeLicenseCommand:
    """Command to permanently revoke a license."""

    license_id: uuid.UUID
    actor: Optional[str] = None
