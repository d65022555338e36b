"""
Product domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import ProductSlug


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    ``offline_request_verify_key`` is the optional base64 Ed25519 public key
    the product's clients sign offline activation requests with.
    """

    id: uuid.UUID
    name: str
    slug: ProductSlug
    offline_request_verify_key: Optional[str]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Product name is required")

    @classmethod
    def create(
        cls,
        name: str,
        slug: str,
        offline_request_verify_key: Optional[str] = None,
        product_id: Optional[uuid.UUID] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            name: Display name
            slug: URL-safe identifier, also used as license key prefix
            offline_request_verify_key: Optional base64 public key
            product_id: Optional UUID (generated if not provided)

        Returns:
            Product entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=product_id or uuid.uuid4(),
            name=name,
            slug=ProductSlug(slug),
            offline_request_verify_key=offline_request_verify_key,
            created_at=now,
            updated_at=now,
        )

    def verifies_offline_requests(self) -> bool:
        """Whether offline request signatures are checked for this product."""
        return bool(self.offline_request_verify_key)
