"""
SHA-256 helpers used for checksums and device fingerprint anonymization.
"""

import hashlib
from typing import Any, Union

from core.crypto.canonical import canonical_bytes


def sha256_hex(data: Union[str, bytes]) -> str:
    """Return the lowercase hex SHA-256 digest of ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def canonical_sha256(value: Any) -> str:
    """Return the SHA-256 hex digest of the canonical form of ``value``."""
    return sha256_hex(canonical_bytes(value))


def hash_device_fingerprint(fingerprint: str) -> str:
    """One-way hash of a client device fingerprint."""
    return sha256_hex(fingerprint)
