"""
RevalidateCommand.

Command to refresh an activation token for an already active device.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RevalidateCommand:
    """Command to revalidate ``activation_token`` for ``device_fingerprint``."""

    activation_token: str
    device_fingerprint: str
    app_version: str
    ip: Optional[str] = None
    user_agent: Optional[str] = None
