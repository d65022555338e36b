"""
OfflineRequest and OfflineLicenseFile models.
"""
import uuid

from django.db import models


class OfflineRequest(models.Model):
    """An offline activation request, keyed by its client nonce."""

    STATUS_CHOICES = [
        ("RECEIVED", "Received"),
        ("USED", "Used"),
        ("REJECTED", "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nonce = models.CharField(max_length=200, unique=True)
    product = models.ForeignKey(
        "catalog.Product", on_delete=models.PROTECT, related_name="offline_requests"
    )
    tenant = models.ForeignKey(
        "catalog.Tenant",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offline_requests",
    )
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offline_requests",
    )
    payload = models.JSONField(help_text="Checksummed request payload")
    payload_hash = models.CharField(max_length=64)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="RECEIVED")
    used_at = models.DateTimeField(null=True, blank=True)
    created_by = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "offline_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self):
        return f"{self.nonce} ({self.status})"


class OfflineLicenseFile(models.Model):
    """A signed offline license file. Rows are never updated."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    offline_request = models.ForeignKey(
        OfflineRequest, on_delete=models.PROTECT, related_name="license_files"
    )
    license = models.ForeignKey(
        "licenses.License", on_delete=models.PROTECT, related_name="offline_license_files"
    )
    file_name = models.CharField(max_length=300, unique=True)
    payload = models.JSONField()
    signature_ed25519 = models.TextField()
    public_key_ed25519 = models.TextField()
    created_by = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "offline_license_files"
        ordering = ["-created_at"]

    def __str__(self):
        return self.file_name
