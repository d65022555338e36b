"""
Serializers for activation API endpoints.

Field names are camelCase on the wire and map onto snake_case through ``source``.
"""

from rest_framework import serializers


class OnlineActivationRequestSerializer(serializers.Serializer):
    """Serializer for online activation request."""

    licenseKey = serializers.CharField(source="license_key", min_length=6, max_length=100)
    productId = serializers.UUIDField(source="product_id")
    appVersion = serializers.CharField(source="app_version", max_length=50)
    deviceFingerprint = serializers.CharField(
        source="device_fingerprint", min_length=8, max_length=500
    )


class RevalidateRequestSerializer(serializers.Serializer):
    """Serializer for revalidation request."""

    activationToken = serializers.CharField(source="activation_token", min_length=10)
    deviceFingerprint = serializers.CharField(
        source="device_fingerprint", min_length=8, max_length=500
    )
    appVersion = serializers.CharField(source="app_version", max_length=50)


class ActivationTokenResponseSerializer(serializers.Serializer):
    """Serializer for ActivationTokenDTO."""

    activationToken = serializers.CharField(source="activation_token")
    offlineDays = serializers.IntegerField(source="offline_days")
    expiry = serializers.CharField()


class OfflineRequestPayloadSerializer(serializers.Serializer):
    """Shape check for an offline request payload. The raw dict is what gets checksummed."""

    productId = serializers.UUIDField()
    appVersion = serializers.CharField(min_length=1)
    deviceFingerprint = serializers.CharField(min_length=8)
    tenantName = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    timestamp = serializers.IntegerField(min_value=1)
    nonce = serializers.CharField(min_length=8, max_length=200)


class OfflineRequestFileSerializer(serializers.Serializer):
    """Serializer for an offline request file."""

    payload = serializers.DictField()
    checksumSha256 = serializers.RegexField(r"^[0-9a-fA-F]{64}$")
    signatureEd25519 = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_payload(self, value):
        payload_serializer = OfflineRequestPayloadSerializer(data=value)
        payload_serializer.is_valid(raise_exception=True)
        # Keep the client's values as sent; checksums cover the exact JSON.
        return value


class ProductSummarySerializer(serializers.Serializer):
    """Serializer for ProductSummaryDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    slug = serializers.CharField()


class RequestValidationResponseSerializer(serializers.Serializer):
    """Serializer for RequestValidationDTO."""

    ok = serializers.BooleanField()
    product = ProductSummarySerializer()
