"""
Django implementation of ProductRepository port.
"""

import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from catalog.domain.product import Product
from catalog.infrastructure.models import Product as ProductModel
from catalog.ports.product_repository import ProductRepository
from core.domain.value_objects import ProductSlug


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            slug=ProductSlug(model.slug),
            offline_request_verify_key=model.offline_request_verify_key,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _save(self, product: Product) -> ProductModel:
        # pylint: disable=no-member
        model, _ = ProductModel.objects.update_or_create(
            id=product.id,
            defaults={
                "name": product.name,
                "slug": str(product.slug),
                "offline_request_verify_key": product.offline_request_verify_key,
            },
        )
        return model

    async def save(self, product: Product) -> Product:
        model = await sync_to_async(self._save)(product)
        return self._to_domain(model)

    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        # pylint: disable=no-member
        model = await sync_to_async(ProductModel.objects.filter(id=product_id).first)()
        return self._to_domain(model) if model else None
