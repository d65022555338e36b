"""
Integration tests for operator (admin) API endpoints.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse
from django.utils.dateparse import parse_datetime

from activations.domain.activation import DeviceActivation
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from core.config import ActivationConfig
from core.crypto.canonical import canonical_bytes
from core.crypto.hashing import sha256_hex
from core.crypto.signing import verify_signature
from offline.infrastructure.models import OfflineRequest
from tests.factories import make_request_file
from vouchers.infrastructure.models import Voucher


def token_with(*permissions):
    signer = ActivationConfig.from_settings().access_token_signer()
    return signer.sign(
        {"sub": "limited@test", "permissions": list(permissions)}, ttl=timedelta(minutes=5)
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestOperatorAuthentication:
    def test_missing_token(self, api_client):
        response = api_client.get(reverse("admin_api:stats"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_token_for_other_audience(self, api_client):
        activation_token = ActivationConfig.from_settings().activation_token_signer().sign(
            {"sub": "device"}, ttl=timedelta(minutes=5)
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {activation_token}")

        assert api_client.get(reverse("admin_api:stats")).status_code == 401

    def test_missing_permission(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_with('stats:read')}")

        response = api_client.post(reverse("admin_api:voucher-batch"), {}, format="json")

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Missing permission: vouchers:write"

    def test_scoped_permission(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_with('stats:read')}")
        assert api_client.get(reverse("admin_api:stats")).status_code == 200

    def test_public_paths_need_no_token(self, api_client):
        assert api_client.get("/health/").status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseLifecycleAPI:
    def _post(self, client, name, license_id, body=None):
        url = reverse(f"admin_api:license-{name}", kwargs={"license_id": license_id})
        return client.post(url, body or {}, format="json")

    def test_suspend_resume_revoke(self, admin_client, db_license):
        response = self._post(admin_client, "suspend", db_license.id)
        assert response.status_code == 200
        assert response.json()["status"] == "SUSPENDED"

        response = self._post(admin_client, "resume", db_license.id)
        assert response.json()["status"] == "ACTIVE"

        response = self._post(admin_client, "revoke", db_license.id)
        assert response.json()["status"] == "REVOKED"

        response = self._post(admin_client, "resume", db_license.id)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_renew(self, admin_client, db_license):
        response = self._post(admin_client, "renew", db_license.id, {"addDays": 30})

        assert response.status_code == 200
        renewed = parse_datetime(response.json()["expiresAt"])
        assert renewed == db_license.expires_at + timedelta(days=30)

    def test_renew_validation(self, admin_client, db_license):
        response = self._post(admin_client, "renew", db_license.id, {"addDays": 0})
        assert response.status_code == 400

    def test_unknown_license(self, admin_client):
        response = self._post(admin_client, "suspend", uuid.uuid4())
        assert response.status_code == 404


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceRevocationAPI:
    def test_revoke_by_fingerprint(self, admin_client, db_license):
        repository = DjangoDeviceActivationRepository()
        async_to_sync(repository.upsert)(
            DeviceActivation.create(db_license.id, sha256_hex("front-desk-pc"))
        )

        response = admin_client.post(
            reverse("admin_api:device-revoke"),
            {"licenseId": str(db_license.id), "deviceFingerprint": "front-desk-pc"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["isActive"] is False
        assert async_to_sync(repository.count_active_by_license)(db_license.id) == 0

    def test_requires_device(self, admin_client, db_license):
        response = admin_client.post(
            reverse("admin_api:device-revoke"), {"licenseId": str(db_license.id)}, format="json"
        )
        assert response.status_code == 400


@pytest.mark.django_db
@pytest.mark.integration
class TestOfflineIssuanceAPI:
    def test_generate_and_download(self, admin_client, db_license):
        request_file = make_request_file(db_license.product_id, nonce="api-nonce-000001")

        response = admin_client.post(
            reverse("admin_api:offline-license-generate"),
            {"requestFile": request_file, "licenseId": str(db_license.id)},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert verify_signature(
            canonical_bytes(data["payload"]), data["signatureEd25519"], data["publicKeyEd25519"]
        )
        stored = OfflineRequest.objects.get(nonce="api-nonce-000001")  # pylint: disable=no-member
        assert stored.status == "USED"
        assert stored.created_by == "ops@test"

        download = admin_client.get(
            reverse("admin_api:offline-file-download", kwargs={"file_id": data["id"]})
        )
        assert download.status_code == 200
        assert download["Content-Disposition"] == f'attachment; filename="{data["fileName"]}"'
        assert download.json()["signatureEd25519"] == data["signatureEd25519"]

        replay = admin_client.post(
            reverse("admin_api:offline-license-generate"),
            {"requestFile": request_file, "licenseId": str(db_license.id)},
            format="json",
        )
        assert replay.status_code == 409
        assert replay.json()["error"]["code"] == "NONCE_USED"

    def test_public_key(self, admin_client):
        response = admin_client.get(reverse("admin_api:offline-public-key"))

        assert response.status_code == 200
        expected = ActivationConfig.from_settings().offline_signer().public_key_b64
        assert response.json() == {"publicKeyEd25519": expected}


@pytest.mark.django_db
@pytest.mark.integration
class TestVoucherAdminAPI:
    def test_create_batch_and_cancel(self, admin_client, db_product):
        response = admin_client.post(
            reverse("admin_api:voucher-batch"),
            {
                "productId": str(db_product.id),
                "quantity": 3,
                "batchName": "launch",
                "licenseType": "FULL",
                "planType": "SUBSCRIPTION",
                "licenseDurationDays": 365,
                "maxDevices": 2,
                "modules": {"reports": True},
            },
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 3
        assert Voucher.objects.filter(batch_name="launch").count() == 3  # pylint: disable=no-member

        voucher_id = data["vouchers"][0]["id"]
        cancel_url = reverse("admin_api:voucher-cancel", kwargs={"voucher_id": voucher_id})
        cancelled = admin_client.post(cancel_url)
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "CANCELLED"

        again = admin_client.post(cancel_url)
        assert again.status_code == 409
        assert again.json()["error"]["detail"] == "Estado: CANCELLED"

    def test_batch_quantity_limit(self, admin_client, db_product):
        response = admin_client.post(
            reverse("admin_api:voucher-batch"),
            {
                "productId": str(db_product.id),
                "quantity": 501,
                "licenseType": "FULL",
                "planType": "PERPETUAL",
            },
            format="json",
        )
        assert response.status_code == 400


@pytest.mark.django_db
@pytest.mark.integration
class TestSettingsAndStatsAPI:
    def test_revalidation_setting_changes_token_window(self, admin_client, api_client, db_license):
        response = admin_client.put(
            reverse("admin_api:settings-revalidation"), {"offlineDays": 12}, format="json"
        )
        assert response.status_code == 200
        assert response.json() == {"offlineDays": 12}

        activation = api_client.post(
            reverse("activation:online"),
            {
                "licenseKey": db_license.key,
                "productId": str(db_license.product_id),
                "appVersion": "1.0.0",
                "deviceFingerprint": "settings-machine-01",
            },
            format="json",
        )
        assert activation.json()["offlineDays"] == 12

    def test_stats(self, admin_client, db_license):
        response = admin_client.get(reverse("admin_api:stats"))

        assert response.status_code == 200
        data = response.json()
        assert data["activeLicenses"] == 1
        assert data["activeDevices"] == 0
        assert data["unusedVouchers"] == 0
