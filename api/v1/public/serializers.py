"""
Serializers for public API endpoints.
"""

from rest_framework import serializers

from api.v1.activation.serializers import ProductSummarySerializer


class RedeemVoucherRequestSerializer(serializers.Serializer):
    """Serializer for voucher redemption request."""

    code = serializers.CharField(min_length=6, max_length=64)
    tradeName = serializers.CharField(source="trade_name", min_length=2, max_length=200)
    contactEmail = serializers.EmailField(
        source="contact_email", required=False, allow_null=True, allow_blank=True
    )
    contactPhone = serializers.CharField(
        source="contact_phone",
        required=False,
        allow_null=True,
        allow_blank=True,
        min_length=7,
        max_length=30,
    )


class TenantSummarySerializer(serializers.Serializer):
    """Serializer for TenantSummaryDTO."""

    id = serializers.UUIDField()
    tradeName = serializers.CharField(source="trade_name")
    contactEmail = serializers.CharField(source="contact_email", allow_null=True)


class LicenseSummarySerializer(serializers.Serializer):
    """Serializer for LicenseSummaryDTO."""

    id = serializers.UUIDField()
    key = serializers.CharField()
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)


class RedeemVoucherResponseSerializer(serializers.Serializer):
    """Serializer for RedeemVoucherResponseDTO."""

    ok = serializers.BooleanField()
    product = ProductSummarySerializer()
    tenant = TenantSummarySerializer()
    license = LicenseSummarySerializer()
