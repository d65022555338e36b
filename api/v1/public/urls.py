"""
URL configuration for public API endpoints.
"""

from django.urls import path

from api.v1.public import views

app_name = "public"

urlpatterns = [
    path("vouchers/redeem", views.RedeemVoucherView.as_view(), name="voucher-redeem"),
]
