"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.core.cache import cache

from catalog.domain.product import Product
from catalog.domain.tenant import Tenant
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from catalog.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository
from core.config import ActivationConfig
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from tests.factories import TEST_SIGNING_KEY, FrozenClock, make_license
from tests.fakes import (
    InMemoryAttemptRepository,
    InMemoryDeviceActivationRepository,
    InMemoryLicenseFileRepository,
    InMemoryLicenseRepository,
    InMemoryOfflineRequestRepository,
    InMemoryProductRepository,
    InMemorySettingsRepository,
    InMemoryTenantRepository,
    InMemoryVoucherRepository,
    RecordingEventBus,
)


@pytest.fixture(autouse=True)
def clear_cache():
    """Stored settings are cached; start every test from a cold cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def config():
    return ActivationConfig(
        signing_key=TEST_SIGNING_KEY,
        activation_token_secret="unit-activation-secret-0123456789abcdef",
        access_token_secret="unit-access-secret-0123456789abcdefghij",
        offline_days=7,
    )


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def license_repository():
    return InMemoryLicenseRepository()


@pytest.fixture
def activation_repository():
    return InMemoryDeviceActivationRepository()


@pytest.fixture
def attempt_repository():
    return InMemoryAttemptRepository()


@pytest.fixture
def settings_repository():
    return InMemorySettingsRepository()


@pytest.fixture
def product_repository():
    return InMemoryProductRepository()


@pytest.fixture
def tenant_repository():
    return InMemoryTenantRepository()


@pytest.fixture
def offline_request_repository():
    return InMemoryOfflineRequestRepository()


@pytest.fixture
def license_file_repository():
    return InMemoryLicenseFileRepository()


@pytest.fixture
def voucher_repository():
    return InMemoryVoucherRepository()


@pytest.fixture
def product(product_repository):
    """A product registered in the in-memory catalog."""
    return product_repository.add(Product.create(name="Demo App", slug="demo-app"))


@pytest.fixture
def tenant(tenant_repository):
    return tenant_repository.add(
        Tenant.create(trade_name="Acme Ltda", contact_email="owner@acme.test")
    )


@pytest.fixture
def license(license_repository, product, tenant):
    """An ACTIVE license expiring 30 days after the frozen clock."""
    return license_repository.add(make_license(product.id, tenant.id))


# Database fixtures


@pytest.fixture
def db_product(db):
    """Fixture for a Product saved in database."""
    unique_id = uuid.uuid4().hex[:8]
    product = Product.create(name=f"Demo App {unique_id}", slug=f"demo-app-{unique_id}")
    return async_to_sync(DjangoProductRepository().save)(product)


@pytest.fixture
def db_tenant(db):
    """Fixture for a Tenant saved in database."""
    tenant = Tenant.create(trade_name="Acme Ltda", contact_email="owner@acme.test")
    return async_to_sync(DjangoTenantRepository().save)(tenant)


@pytest.fixture
def db_license(db_product, db_tenant):
    """Fixture for an ACTIVE license saved in database, expiring in a year."""
    license = make_license(
        db_product.id,
        db_tenant.id,
        expires_at=datetime.now(timezone.utc) + timedelta(days=365),
        starts_at=datetime.now(timezone.utc),
    )
    return async_to_sync(DjangoLicenseRepository().save)(license)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def operator_token(settings):
    """Bearer token holding every operator permission."""
    signer = ActivationConfig.from_settings().access_token_signer()
    return signer.sign(
        {"sub": "ops@test", "email": "ops@test", "permissions": ["*"]},
        ttl=timedelta(minutes=30),
    )


@pytest.fixture
def admin_client(api_client, operator_token):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {operator_token}")
    return api_client
