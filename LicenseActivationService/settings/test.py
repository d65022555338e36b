"""
Test settings for LicenseActivationService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

# Use in-memory SQLite for fast tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Use in-memory cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Fixed test keys
ACTIVATION_SERVICE = {
    **ACTIVATION_SERVICE,  # noqa: F405
    "OFFLINE_DAYS": 7,
    "SIGNING_KEY": "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHh8=",
    "ACTIVATION_TOKEN_SECRET": "test-activation-secret-0123456789abcdef",
    "ACCESS_TOKEN_SECRET": "test-access-secret-0123456789abcdefghij",
    "TOKEN_ISSUER": "license-activation-service",
    "TOKEN_TTL_ACTIVATION_DAYS": None,
    "VOUCHER_PREFIX": "FT",
    "SETTINGS_CACHE_TIMEOUT": 60,
}

# Disable logging during tests
LOGGING_CONFIG = None
