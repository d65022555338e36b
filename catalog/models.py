"""
Model registration for the catalog app.
"""
from catalog.infrastructure.models import Product, Tenant  # noqa: F401
