"""
Offline DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict

from catalog.domain.product import Product
from offline.domain.license_file import OfflineLicenseFile


@dataclass
class ProductSummaryDTO:
    """DTO for the product a request targets."""

    id: uuid.UUID
    name: str
    slug: str

    @classmethod
    def from_entity(cls, product: Product) -> "ProductSummaryDTO":
        return cls(id=product.id, name=product.name, slug=str(product.slug))


@dataclass
class RequestValidationDTO:
    """DTO for request validation response."""

    ok: bool
    product: ProductSummaryDTO


@dataclass
class LicenseFileDTO:
    """DTO for an issued offline license file."""

    id: uuid.UUID
    file_name: str
    payload: Dict[str, Any]
    signature_ed25519: str
    public_key_ed25519: str

    @classmethod
    def from_entity(cls, license_file: OfflineLicenseFile) -> "LicenseFileDTO":
        return cls(
            id=license_file.id,
            file_name=license_file.file_name,
            payload=license_file.payload,
            signature_ed25519=license_file.signature_ed25519,
            public_key_ed25519=license_file.public_key_ed25519,
        )

    def artifact(self) -> Dict[str, Any]:
        return {
            "payload": self.payload,
            "signatureEd25519": self.signature_ed25519,
            "publicKeyEd25519": self.public_key_ed25519,
        }
