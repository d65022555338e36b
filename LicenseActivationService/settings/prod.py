"""
Production settings for LicenseActivationService.
"""

import os

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Security settings
SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "true").lower() == "true"
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Secret key from environment
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "")
if not SECRET_KEY:
    raise ImproperlyConfigured("DJANGO_SECRET_KEY must be set in production")

for _name in ("SIGNING_KEY", "ACTIVATION_TOKEN_SECRET", "ACCESS_TOKEN_SECRET"):
    if not ACTIVATION_SERVICE[_name]:  # noqa: F405
        raise ImproperlyConfigured(f"ACTIVATION_SERVICE[{_name!r}] must be set in production")
