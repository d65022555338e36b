"""
Serializers for operator API endpoints.
"""

from rest_framework import serializers

from api.v1.activation.serializers import OfflineRequestFileSerializer, ProductSummarySerializer
from core.domain.value_objects import LicenseType, PlanType
from licenses.domain.license import MAX_RENEWAL_DAYS
from vouchers.application.commands.create_voucher_batch import MAX_BATCH_QUANTITY


class GenerateLicenseFileRequestSerializer(serializers.Serializer):
    """Serializer for offline license file generation request."""

    requestFile = OfflineRequestFileSerializer(source="request_file")
    licenseId = serializers.UUIDField(source="license_id")


class LicenseFileResponseSerializer(serializers.Serializer):
    """Serializer for LicenseFileDTO."""

    id = serializers.UUIDField()
    fileName = serializers.CharField(source="file_name")
    payload = serializers.DictField()
    signatureEd25519 = serializers.CharField(source="signature_ed25519")
    publicKeyEd25519 = serializers.CharField(source="public_key_ed25519")


class RenewLicenseRequestSerializer(serializers.Serializer):
    """Serializer for license renewal request."""

    addDays = serializers.IntegerField(source="add_days", min_value=1, max_value=MAX_RENEWAL_DAYS)


class LicenseStatusResponseSerializer(serializers.Serializer):
    """Serializer for LicenseStatusDTO."""

    id = serializers.UUIDField()
    key = serializers.CharField()
    status = serializers.CharField()
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)


class RevokeDeviceRequestSerializer(serializers.Serializer):
    """Serializer for device revocation. Either the hash or the raw fingerprint is required."""

    licenseId = serializers.UUIDField(source="license_id")
    deviceIdHash = serializers.RegexField(
        r"^[0-9a-f]{64}$", source="device_id_hash", required=False
    )
    deviceFingerprint = serializers.CharField(
        source="device_fingerprint", min_length=8, max_length=500, required=False
    )

    def validate(self, attrs):
        if not attrs.get("device_id_hash") and not attrs.get("device_fingerprint"):
            raise serializers.ValidationError("deviceIdHash or deviceFingerprint is required")
        return attrs


class DeviceActivationResponseSerializer(serializers.Serializer):
    """Serializer for DeviceActivationDTO."""

    id = serializers.UUIDField()
    licenseId = serializers.UUIDField(source="license_id")
    deviceIdHash = serializers.CharField(source="device_id_hash")
    appVersion = serializers.CharField(source="app_version", allow_null=True)
    activatedAt = serializers.DateTimeField(source="activated_at")
    lastSeenAt = serializers.DateTimeField(source="last_seen_at")
    revokedAt = serializers.DateTimeField(source="revoked_at", allow_null=True)
    isActive = serializers.BooleanField(source="is_active")


class CreateVoucherBatchRequestSerializer(serializers.Serializer):
    """Serializer for voucher batch creation request."""

    productId = serializers.UUIDField(source="product_id")
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_BATCH_QUANTITY)
    batchName = serializers.CharField(
        source="batch_name", required=False, allow_null=True, min_length=2, max_length=200
    )
    licenseType = serializers.ChoiceField(
        source="license_type", choices=[t.value for t in LicenseType]
    )
    planType = serializers.ChoiceField(source="plan_type", choices=[p.value for p in PlanType])
    licenseDurationDays = serializers.IntegerField(
        source="license_duration_days", required=False, allow_null=True, min_value=1, max_value=3650
    )
    maxDevices = serializers.IntegerField(
        source="max_devices", default=1, min_value=1, max_value=1000
    )
    maxActivations = serializers.IntegerField(
        source="max_activations", default=1, min_value=1, max_value=10000
    )
    offlineAllowed = serializers.BooleanField(source="offline_allowed", default=True)
    revalidateDays = serializers.IntegerField(
        source="revalidate_days", required=False, allow_null=True, min_value=1, max_value=365
    )
    allowedVersionMin = serializers.CharField(
        source="allowed_version_min", required=False, allow_null=True, max_length=50
    )
    allowedVersionMax = serializers.CharField(
        source="allowed_version_max", required=False, allow_null=True, max_length=50
    )
    modules = serializers.DictField(child=serializers.BooleanField(), default=dict)
    features = serializers.DictField(default=dict)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VoucherCodeSerializer(serializers.Serializer):
    """Serializer for VoucherCodeDTO."""

    id = serializers.UUIDField()
    code = serializers.CharField()


class VoucherBatchResponseSerializer(serializers.Serializer):
    """Serializer for VoucherBatchDTO."""

    product = ProductSummarySerializer()
    count = serializers.IntegerField()
    vouchers = VoucherCodeSerializer(many=True)


class VoucherResponseSerializer(serializers.Serializer):
    """Serializer for VoucherDTO."""

    id = serializers.UUIDField()
    code = serializers.CharField()
    status = serializers.CharField()
    productId = serializers.UUIDField(source="product_id")
    batchName = serializers.CharField(source="batch_name", allow_null=True)


class RevalidationSettingSerializer(serializers.Serializer):
    """Serializer for the revalidation setting."""

    offlineDays = serializers.IntegerField(source="offline_days", min_value=1, max_value=365)


class StatsResponseSerializer(serializers.Serializer):
    """Serializer for ActivationStatsDTO."""

    activeLicenses = serializers.IntegerField(source="active_licenses")
    suspendedLicenses = serializers.IntegerField(source="suspended_licenses")
    expiredLicenses = serializers.IntegerField(source="expired_licenses")
    revokedLicenses = serializers.IntegerField(source="revoked_licenses")
    activeDevices = serializers.IntegerField(source="active_devices")
    unusedVouchers = serializers.IntegerField(source="unused_vouchers")
    usedVouchers = serializers.IntegerField(source="used_vouchers")
