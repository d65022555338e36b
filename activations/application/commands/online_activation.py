"""
OnlineActivationCommand.

Command to activate a device against a license over the network.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class OnlineActivationCommand:
    """Command to activate ``device_fingerprint`` on the license ``license_key``."""

    license_key: str
    product_id: uuid.UUID
    app_version: str
    device_fingerprint: str
    ip: Optional[str] = None
    user_agent: Optional[str] = None
