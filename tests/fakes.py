"""
In-memory repository fakes for unit tests.

Each fake implements its port with plain dicts. The ``add`` helpers are
synchronous so fixtures can seed state without an event loop.
"""

import contextlib
import copy
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from activations.domain.activation import DeviceActivation
from activations.domain.attempt import ActivationAttempt
from activations.ports.activation_repository import DeviceActivationRepository
from activations.ports.attempt_repository import ActivationAttemptRepository
from catalog.domain.product import Product
from catalog.domain.tenant import Tenant
from catalog.ports.product_repository import ProductRepository
from catalog.ports.tenant_repository import TenantRepository
from core.domain.events import DomainEvent, EventBus, EventHandler
from core.domain.exceptions import DuplicateVoucherCodeError
from core.domain.value_objects import LicenseStatus
from core.ports.settings_repository import SettingsRepository
from core.ports.unit_of_work import UnitOfWork
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from offline.domain.license_file import OfflineLicenseFile
from offline.domain.request_file import OfflineRequest, OfflineRequestStatus
from offline.ports.license_file_repository import OfflineLicenseFileRepository
from offline.ports.offline_request_repository import OfflineRequestRepository
from vouchers.domain.voucher import Voucher, VoucherStatus
from vouchers.ports.voucher_repository import VoucherRepository


class InMemoryLicenseRepository(LicenseRepository):
    def __init__(self):
        self.licenses: Dict[uuid.UUID, License] = {}

    def add(self, license: License) -> License:
        self.licenses[license.id] = license
        return license

    async def save(self, license: License) -> License:
        return self.add(license)

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        return self.licenses.get(license_id)

    async def find_by_key_and_product(self, key: str, product_id: uuid.UUID) -> Optional[License]:
        for license in self.licenses.values():
            if license.key == key and license.product_id == product_id:
                return license
        return None

    async def update_status(
        self,
        license_id: uuid.UUID,
        new_status: LicenseStatus,
        expected_status: Optional[LicenseStatus] = None,
    ) -> bool:
        license = self.licenses.get(license_id)
        if license is None:
            return False
        if expected_status is not None and license.status is not expected_status:
            return False
        self.licenses[license_id] = replace(license, status=new_status)
        return True

    async def find_active_expired(self, now: datetime, limit: int = 500) -> List[License]:
        expired = [
            license
            for license in self.licenses.values()
            if license.status is LicenseStatus.ACTIVE
            and license.expires_at is not None
            and license.expires_at < now
        ]
        return sorted(expired, key=lambda l: l.expires_at)[:limit]

    async def count_by_status(self, status: LicenseStatus) -> int:
        return sum(1 for license in self.licenses.values() if license.status is status)


class InMemoryDeviceActivationRepository(DeviceActivationRepository):
    def __init__(self):
        self.activations: Dict[tuple, DeviceActivation] = {}

    def add(self, activation: DeviceActivation) -> DeviceActivation:
        key = (activation.license_id, activation.device_id_hash)
        existing = self.activations.get(key)
        if existing is not None:
            # The row keeps its identity and first activation time.
            activation = replace(
                activation, id=existing.id, activated_at=existing.activated_at
            )
        self.activations[key] = activation
        return activation

    async def upsert(self, activation: DeviceActivation) -> DeviceActivation:
        return self.add(activation)

    async def touch(self, activation: DeviceActivation) -> bool:
        key = (activation.license_id, activation.device_id_hash)
        existing = self.activations.get(key)
        if existing is None or not existing.is_active:
            return False
        self.activations[key] = replace(
            existing,
            app_version=activation.app_version,
            last_seen_at=activation.last_seen_at,
            ip=activation.ip,
            user_agent=activation.user_agent,
        )
        return True

    async def find_by_license_and_device(
        self, license_id: uuid.UUID, device_id_hash: str
    ) -> Optional[DeviceActivation]:
        return self.activations.get((license_id, device_id_hash))

    def _for_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        return [a for a in self.activations.values() if a.license_id == license_id]

    async def count_active_by_license(self, license_id: uuid.UUID) -> int:
        return sum(1 for a in self._for_license(license_id) if a.is_active)

    async def count_by_license(self, license_id: uuid.UUID) -> int:
        return len(self._for_license(license_id))

    async def find_active_by_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        active = [a for a in self._for_license(license_id) if a.is_active]
        return sorted(active, key=lambda a: a.activated_at)

    async def count_active(self) -> int:
        return sum(1 for a in self.activations.values() if a.is_active)


class InMemoryAttemptRepository(ActivationAttemptRepository):
    def __init__(self):
        self.attempts: List[ActivationAttempt] = []

    async def add(self, attempt: ActivationAttempt) -> None:
        self.attempts.append(attempt)

    @property
    def results(self) -> List[str]:
        return [attempt.result.value for attempt in self.attempts]


class FailingAttemptRepository(ActivationAttemptRepository):
    async def add(self, attempt: ActivationAttempt) -> None:
        raise RuntimeError("attempt store unavailable")


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self, values: Optional[dict] = None):
        self.values = dict(values or {})

    async def get(self, key: str):
        return self.values.get(key)

    async def put(self, key: str, value) -> None:
        self.values[key] = value


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self.products: Dict[uuid.UUID, Product] = {}

    def add(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    async def save(self, product: Product) -> Product:
        return self.add(product)

    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.products.get(product_id)


class InMemoryTenantRepository(TenantRepository):
    def __init__(self):
        self.tenants: Dict[uuid.UUID, Tenant] = {}

    def add(self, tenant: Tenant) -> Tenant:
        self.tenants[tenant.id] = tenant
        return tenant

    async def save(self, tenant: Tenant) -> Tenant:
        return self.add(tenant)

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[Tenant]:
        return self.tenants.get(tenant_id)

    async def find_by_contact_email(self, email: str) -> Optional[Tenant]:
        matches = [
            t
            for t in self.tenants.values()
            if t.contact_email and str(t.contact_email).lower() == email.lower()
        ]
        return min(matches, key=lambda t: t.created_at) if matches else None


class InMemoryOfflineRequestRepository(OfflineRequestRepository):
    def __init__(self):
        self.requests: Dict[str, OfflineRequest] = {}

    def add(self, request: OfflineRequest) -> OfflineRequest:
        self.requests[request.nonce] = request
        return request

    async def find_by_nonce(self, nonce: str) -> Optional[OfflineRequest]:
        return self.requests.get(nonce)

    async def record_received(self, request: OfflineRequest) -> OfflineRequest:
        return self.requests.setdefault(request.nonce, request)

    def _transition(self, request: OfflineRequest) -> Optional[OfflineRequest]:
        existing = self.requests.get(request.nonce)
        if existing is not None and existing.is_used:
            return None
        if existing is not None:
            request = replace(request, id=existing.id, created_at=existing.created_at)
        return self.add(request)

    async def claim(self, request: OfflineRequest) -> Optional[OfflineRequest]:
        assert request.status is OfflineRequestStatus.USED
        return self._transition(request)

    async def mark_rejected(self, request: OfflineRequest) -> bool:
        assert request.status is OfflineRequestStatus.REJECTED
        return self._transition(request) is not None


class InMemoryLicenseFileRepository(OfflineLicenseFileRepository):
    def __init__(self):
        self.files: Dict[uuid.UUID, OfflineLicenseFile] = {}

    async def save(self, license_file: OfflineLicenseFile) -> OfflineLicenseFile:
        self.files[license_file.id] = license_file
        return license_file

    async def find_by_id(self, file_id: uuid.UUID) -> Optional[OfflineLicenseFile]:
        return self.files.get(file_id)


class InMemoryVoucherRepository(VoucherRepository):
    def __init__(self):
        self.vouchers: Dict[uuid.UUID, Voucher] = {}

    def add(self, voucher: Voucher) -> Voucher:
        self.vouchers[voucher.id] = voucher
        return voucher

    async def create(self, voucher: Voucher) -> Voucher:
        if any(v.code == voucher.code for v in self.vouchers.values()):
            raise DuplicateVoucherCodeError()
        return self.add(voucher)

    async def find_by_id(self, voucher_id: uuid.UUID) -> Optional[Voucher]:
        return self.vouchers.get(voucher_id)

    async def find_by_code(self, code: str) -> Optional[Voucher]:
        for voucher in self.vouchers.values():
            if voucher.code == code:
                return voucher
        return None

    async def mark_used(
        self,
        voucher_id: uuid.UUID,
        tenant_id: uuid.UUID,
        license_id: uuid.UUID,
        email: Optional[str],
        used_at: datetime,
    ) -> bool:
        voucher = self.vouchers.get(voucher_id)
        if voucher is None or voucher.status is not VoucherStatus.UNUSED:
            return False
        self.vouchers[voucher_id] = voucher.redeemed(tenant_id, license_id, email, used_at)
        return True

    async def cancel(self, voucher_id: uuid.UUID) -> bool:
        voucher = self.vouchers.get(voucher_id)
        if voucher is None or voucher.status is not VoucherStatus.UNUSED:
            return False
        self.vouchers[voucher_id] = replace(voucher, status=VoucherStatus.CANCELLED)
        return True

    async def count_by_status(self, status: VoucherStatus) -> int:
        return sum(1 for v in self.vouchers.values() if v.status is status)


class InMemoryUnitOfWork(UnitOfWork):
    """Snapshots the given fakes on entry and restores them if the block raises."""

    def __init__(self, *repositories):
        self.repositories = repositories
        self.commits = 0
        self.rollbacks = 0

    @contextlib.asynccontextmanager
    async def _atomic(self):
        snapshots = [
            {name: copy.copy(value) for name, value in vars(repo).items()}
            for repo in self.repositories
        ]
        try:
            yield
        except BaseException:
            for repo, snapshot in zip(self.repositories, snapshots):
                repo.__dict__.update(snapshot)
            self.rollbacks += 1
            raise
        self.commits += 1

    def atomic(self):
        return self._atomic()


class RecordingEventBus(EventBus):
    """Event bus that just remembers what was published."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def subscribe(self, event_type, handler: EventHandler) -> None:
        pass

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type) -> List[DomainEvent]:
        return [e for e in self.events if isinstance(e, event_type)]
