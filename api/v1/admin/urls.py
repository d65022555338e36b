"""
URL configuration for operator API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin_api"

urlpatterns = [
    # Offline licensing
    path("offline/license/generate", views.GenerateLicenseFileView.as_view(), name="offline-license-generate"),
    path(
        "offline/files/<uuid:file_id>/download",
        views.DownloadLicenseFileView.as_view(),
        name="offline-file-download",
    ),
    path("crypto/offline-public-key", views.OfflinePublicKeyView.as_view(), name="offline-public-key"),
    # License lifecycle
    path("licenses/<uuid:license_id>/suspend", views.SuspendLicenseView.as_view(), name="license-suspend"),
    path("licenses/<uuid:license_id>/resume", views.ResumeLicenseView.as_view(), name="license-resume"),
    path("licenses/<uuid:license_id>/revoke", views.RevokeLicenseView.as_view(), name="license-revoke"),
    path("licenses/<uuid:license_id>/renew", views.RenewLicenseView.as_view(), name="license-renew"),
    # Devices
    path("activations/revoke", views.RevokeDeviceView.as_view(), name="device-revoke"),
    # Vouchers
    path("vouchers/batch", views.CreateVoucherBatchView.as_view(), name="voucher-batch"),
    path("vouchers/<uuid:voucher_id>/cancel", views.CancelVoucherView.as_view(), name="voucher-cancel"),
    # Settings and reporting
    path("settings/revalidation", views.RevalidationSettingView.as_view(), name="settings-revalidation"),
    path("stats", views.StatsView.as_view(), name="stats"),
]
