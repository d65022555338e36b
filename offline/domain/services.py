"""
Offline domain services.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from catalog.domain.product import Product
from catalog.ports.product_repository import ProductRepository
from core.crypto.canonical import canonical_bytes, to_iso8601
from core.crypto.signing import Ed25519Signer, verify_signature
from core.domain.clock import Clock, utcnow
from core.domain.exceptions import (
    InvalidProductError,
    InvalidRequestFileError,
    InvalidSignatureError,
)
from core.domain.value_objects import DeviceFingerprint
from licenses.domain.license import License
from offline.domain.request_file import RequestFile

logger = logging.getLogger(__name__)


class RequestFileVerifier:
    """Checks the integrity and origin of offline request files."""

    def __init__(self, product_repository: ProductRepository):
        self.product_repository = product_repository

    @staticmethod
    def verify_checksum(request_file: RequestFile) -> None:
        """
        Raises:
            InvalidRequestFileError: If the checksum does not match the canonical payload
        """
        if not request_file.checksum_matches():
            raise InvalidRequestFileError(detail="Checksum mismatch")

    async def verify(self, request_file: RequestFile) -> Product:
        """
        Verify checksum, product and, when the product declares a request
        key and the file is signed, the signature.

        Returns:
            The product the request targets

        Raises:
            InvalidRequestFileError: If the checksum does not match
            InvalidProductError: If the product does not exist
            InvalidSignatureError: If the signature does not verify
        """
        self.verify_checksum(request_file)

        product = await self.product_repository.find_by_id(request_file.payload.product_id)
        if not product:
            raise InvalidProductError()

        if request_file.signature_ed25519 and product.verifies_offline_requests():
            if not verify_signature(
                request_file.payload.canonical_bytes(),
                request_file.signature_ed25519,
                product.offline_request_verify_key,
            ):
                logger.warning(
                    "Offline request %s failed signature check for product %s",
                    request_file.payload.nonce,
                    product.id,
                )
                raise InvalidSignatureError()
        return product


class OfflineLicenseSigner:
    """
    Builds and signs offline license payloads.

    Licenses without an expiry get a file valid for ``fallback_days``.
    """

    def __init__(self, signer: Ed25519Signer, fallback_days: int = 3650, clock: Clock = utcnow):
        self.signer = signer
        self.fallback_days = fallback_days
        self.clock = clock

    @property
    def public_key_b64(self) -> str:
        return self.signer.public_key_b64

    def build_payload(self, license: License, request_file: RequestFile) -> Dict[str, Any]:
        now = self.clock()
        expiry = license.expires_at or now + timedelta(days=self.fallback_days)
        return {
            "licenseId": str(license.id),
            "tenantId": str(license.tenant_id),
            "productId": str(license.product_id),
            "features": license.features,
            "modules": license.modules,
            "expiry": to_iso8601(expiry),
            "deviceIdHash": DeviceFingerprint(request_file.payload.device_fingerprint).hash(),
            "issuedAt": to_iso8601(now),
            "requestNonce": request_file.payload.nonce,
        }

    def sign(
        self, license: License, request_file: RequestFile, payload: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, Any], str]:
        """
        Sign the canonical bytes of the license payload.

        Returns:
            (payload, base64 signature)
        """
        payload = payload or self.build_payload(license, request_file)
        return payload, self.signer.sign(canonical_bytes(payload))
