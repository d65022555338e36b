"""
Base Django settings for LicenseActivationService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-7q!v2m@k9x#r4t$w8z^b1n&c5e*h3j(l6p)s0d-f+g=y"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "catalog",
    "licenses",
    "activations",
    "offline",
    "vouchers",
    "api",
    "LicenseActivationService.apps.LicenseActivationServiceConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.OperatorAuthenticationMiddleware",
]

ROOT_URLCONF = "LicenseActivationService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "LicenseActivationService.wsgi.application"
ASGI_APPLICATION = "LicenseActivationService.asgi.application"

# Database
# https://docs.djangoproject.com/en/5.0/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_activation"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Activation Service API",
    "DESCRIPTION": (
        "License activation engine. Provides online activation, token "
        "revalidation, signed offline license files, voucher redemption "
        "and operator license management."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Activation API", "description": "Client activation and revalidation"},
        {"name": "Public API", "description": "Voucher redemption"},
        {"name": "Admin API", "description": "Operator license management"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Activation engine
ACTIVATION_SERVICE = {
    "OFFLINE_DAYS": int(os.environ.get("OFFLINE_DAYS", "7")),
    "SIGNING_KEY": os.environ.get("OFFLINE_ED25519_PRIVATE_KEY_B64", ""),
    "ACTIVATION_TOKEN_SECRET": os.environ.get("ACTIVATION_JWT_SECRET", ""),
    "ACCESS_TOKEN_SECRET": os.environ.get("AUTH_JWT_SECRET", ""),
    "TOKEN_ISSUER": os.environ.get("TOKEN_ISSUER", "license-activation-service"),
    "TOKEN_TTL_ACCESS_MINUTES": int(os.environ.get("TOKEN_TTL_ACCESS_MINUTES", "30")),
    "TOKEN_TTL_ACTIVATION_DAYS": os.environ.get("TOKEN_TTL_ACTIVATION_DAYS") or None,
    "OFFLINE_FALLBACK_DAYS": int(os.environ.get("OFFLINE_FALLBACK_DAYS", "3650")),
    "VOUCHER_PREFIX": os.environ.get("VOUCHER_PREFIX", "FT"),
    "SETTINGS_CACHE_TIMEOUT": int(os.environ.get("SETTINGS_CACHE_TIMEOUT", "60")),
}

# Observability
LOG_FILE = os.environ.get("LOG_FILE")
LOGGING = get_logging_config(ENVIRONMENT, log_file=LOG_FILE)
