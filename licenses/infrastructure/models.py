"""
License model.
"""
import uuid

from django.db import models


class License(models.Model):
    """
    A license grants a tenant the right to run a product on a bounded
    number of devices.
    """

    STATUS_CHOICES = [
        ("ACTIVE", "Active"),
        ("SUSPENDED", "Suspended"),
        ("EXPIRED", "Expired"),
        ("REVOKED", "Revoked"),
    ]
    TYPE_CHOICES = [
        ("DEMO", "Demo"),
        ("FULL", "Full"),
    ]
    PLAN_CHOICES = [
        ("SUBSCRIPTION", "Subscription"),
        ("PERPETUAL", "Perpetual"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    tenant = models.ForeignKey("catalog.Tenant", on_delete=models.PROTECT, related_name="licenses")
    product = models.ForeignKey(
        "catalog.Product", on_delete=models.PROTECT, related_name="licenses"
    )
    license_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default="FULL")
    plan_type = models.CharField(max_length=20, choices=PLAN_CHOICES, default="PERPETUAL")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="ACTIVE")
    starts_at = models.DateTimeField()
    expires_at = models.DateTimeField(null=True, blank=True)
    max_devices = models.PositiveIntegerField(default=1, help_text="Concurrently active devices")
    max_activations = models.PositiveIntegerField(default=1, help_text="Devices ever activated")
    offline_allowed = models.BooleanField(default=False)
    revalidate_days = models.PositiveIntegerField(null=True, blank=True)
    allowed_version_min = models.CharField(max_length=50, null=True, blank=True)
    allowed_version_max = models.CharField(max_length=50, null=True, blank=True)
    modules = models.JSONField(default=dict, blank=True)
    features = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["key", "product"]),
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["tenant"]),
        ]

    def __str__(self):
        return self.key
