"""
Voucher model.
"""
import uuid

from django.db import models


class Voucher(models.Model):
    """A redemption code carrying the template of the license it produces."""

    STATUS_CHOICES = [
        ("UNUSED", "Unused"),
        ("USED", "Used"),
        ("CANCELLED", "Cancelled"),
        ("EXPIRED", "Expired"),
    ]

    LICENSE_TYPE_CHOICES = [
        ("DEMO", "Demo"),
        ("FULL", "Full"),
    ]

    PLAN_TYPE_CHOICES = [
        ("SUBSCRIPTION", "Subscription"),
        ("PERPETUAL", "Perpetual"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=64, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="UNUSED")
    product = models.ForeignKey("catalog.Product", on_delete=models.PROTECT, related_name="vouchers")
    batch_name = models.CharField(max_length=200, null=True, blank=True)

    # License template
    license_type = models.CharField(max_length=10, choices=LICENSE_TYPE_CHOICES)
    plan_type = models.CharField(max_length=20, choices=PLAN_TYPE_CHOICES)
    license_duration_days = models.PositiveIntegerField(null=True, blank=True)
    max_devices = models.PositiveIntegerField(default=1)
    max_activations = models.PositiveIntegerField(default=1)
    offline_allowed = models.BooleanField(default=True)
    revalidate_days = models.PositiveIntegerField(null=True, blank=True)
    allowed_version_min = models.CharField(max_length=50, null=True, blank=True)
    allowed_version_max = models.CharField(max_length=50, null=True, blank=True)
    modules = models.JSONField(default=dict, blank=True)
    features = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True, default="")

    # Redemption
    tenant = models.ForeignKey(
        "catalog.Tenant", on_delete=models.SET_NULL, null=True, blank=True, related_name="vouchers"
    )
    license = models.OneToOneField(
        "licenses.License",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="voucher",
    )
    used_at = models.DateTimeField(null=True, blank=True)
    used_by_email = models.EmailField(null=True, blank=True)

    created_by = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "vouchers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["batch_name"]),
        ]

    def __str__(self):
        return f"{self.code} ({self.status})"
