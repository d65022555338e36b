"""
Ed25519 signing for offline license files.

The private key is configuration: a base64 32-byte seed. A 64-byte
secret key (seed followed by public key, as produced by tweetnacl) is
accepted too and its seed half is used.
"""

import base64
import binascii
import logging

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

logger = logging.getLogger(__name__)

SEED_SIZE = 32
SECRET_KEY_SIZE = 64


class SigningKeyError(ValueError):
    """Raised when the configured private key cannot be decoded."""


def _decode_seed(private_key_b64: str) -> bytes:
    if not private_key_b64:
        raise SigningKeyError("Offline signing key is not configured")
    try:
        raw = base64.b64decode(private_key_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SigningKeyError("Offline signing key is not valid base64") from exc
    if len(raw) == SECRET_KEY_SIZE:
        return raw[:SEED_SIZE]
    if len(raw) != SEED_SIZE:
        raise SigningKeyError(
            f"Offline signing key must be {SEED_SIZE} or {SECRET_KEY_SIZE} bytes, got {len(raw)}"
        )
    return raw


class Ed25519Signer:
    """Signs raw bytes with a configured Ed25519 key."""

    def __init__(self, private_key_b64: str):
        self._signing_key = SigningKey(_decode_seed(private_key_b64))

    @property
    def public_key_b64(self) -> str:
        """Base64 encoded 32-byte public key."""
        return base64.b64encode(self._signing_key.verify_key.encode()).decode()

    def sign(self, message: bytes) -> str:
        """
        Sign ``message``.

        Args:
            message: Bytes to sign (usually canonical JSON bytes)

        Returns:
            Base64 encoded detached signature
        """
        signed = self._signing_key.sign(message)
        return base64.b64encode(signed.signature).decode()


def verify_signature(message: bytes, signature_b64: str, public_key_b64: str) -> bool:
    """
    Verify a detached Ed25519 signature.

    Never raises: malformed keys or signatures simply fail verification.

    Args:
        message: Signed bytes
        signature_b64: Base64 detached signature
        public_key_b64: Base64 32-byte public key

    Returns:
        True if the signature is valid for ``message`` under ``public_key_b64``
    """
    try:
        verify_key = VerifyKey(base64.b64decode(public_key_b64, validate=True))
        verify_key.verify(message, base64.b64decode(signature_b64, validate=True))
        return True
    except BadSignatureError:
        return False
    except (binascii.Error, ValueError, TypeError, CryptoError) as exc:
        logger.debug("Malformed signature or public key: %s", exc)
        return False
