"""
ValidateRequestCommand.

Command to check an offline request file before a license file is issued for it.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ValidateRequestCommand:
    """Command to validate a client request file."""

    payload: Dict[str, Any]
    checksum_sha256: str
    signature_ed25519: Optional[str] = None

    def to_request_file(self) -> Dict[str, Any]:
        return {
            "payload": self.payload,
            "checksumSha256": self.checksum_sha256,
            "signatureEd25519": self.signature_ed25519,
        }
