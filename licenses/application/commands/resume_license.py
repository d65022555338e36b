"""
ResumeLicenseCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class ResumeLicenseCommand:
    """Command to resume a SUSPENDED license."""

    license_id: uuid.UUID
    actor: Optional[str] = None
