"""
GenerateLicenseFileCommand.

Command to issue a signed offline license file for a request file.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GenerateLicenseFileCommand:
    """Command to issue a license file for ``request_file`` on ``license_id``."""

    request_file: Dict[str, Any]
    license_id: uuid.UUID
    actor: Optional[str] = None
    ip: Optional[str] = None
