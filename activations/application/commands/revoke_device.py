"""
RevokeDeviceCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RevokeDeviceCommand:
    """Command to revoke the device ``device_id_hash`` on a license."""

    license_id: uuid.UUID
    device_id_hash: str
    actor: Optional[str] = None
