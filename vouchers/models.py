"""
Django models for vouchers app.

Models are defined in infrastructure/models.py for hexagonal architecture.
This file imports them so Django can discover them.
"""
from vouchers.infrastructure.models import Voucher  # noqa: F401
