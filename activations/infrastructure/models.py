"""
DeviceActivation and ActivationAttempt models.
"""
import uuid

from django.db import models


class DeviceActivation(models.Model):
    """
    A device a license has been activated on.

    Rows are soft-revoked, never deleted, so lifetime counts stay accurate.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License", on_delete=models.CASCADE, related_name="device_activations"
    )
    device_id_hash = models.CharField(max_length=64, help_text="SHA-256 of the device fingerprint")
    app_version = models.CharField(max_length=50, null=True, blank=True)
    ip = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, null=True, blank=True)
    activated_at = models.DateTimeField()
    last_seen_at = models.DateTimeField()
    revoked_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "device_activations"
        ordering = ["activated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["license", "device_id_hash"], name="unique_license_device"
            ),
        ]
        indexes = [
            models.Index(fields=["license", "revoked_at"]),
        ]

    def __str__(self):
        return f"{self.license_id} @ {self.device_id_hash[:12]}"


class ActivationAttempt(models.Model):
    """Append-only log of activation attempts."""

    CHANNEL_CHOICES = [
        ("ONLINE", "Online"),
        ("REVALIDATE", "Revalidate"),
        ("OFFLINE", "Offline"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES)
    result = models.CharField(max_length=30, db_index=True)
    product_id = models.UUIDField(null=True, blank=True)
    license_id = models.UUIDField(null=True, blank=True)
    license_key = models.CharField(max_length=100, null=True, blank=True)
    device_id_hash = models.CharField(max_length=64, null=True, blank=True)
    ip = models.GenericIPAddressField(null=True, blank=True)
    reason = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "activation_attempts"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["license_id", "created_at"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.channel} {self.result}"
