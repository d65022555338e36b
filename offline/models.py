"""
Django models for offline app.

Models are defined in infrastructure/models.py for hexagonal architecture.
This file imports them so Django can discover them.
"""
from offline.infrastructure.models import OfflineLicenseFile, OfflineRequest  # noqa: F401
