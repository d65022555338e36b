"""
URL configuration for activation API endpoints.
"""

from django.urls import path

from api.v1.activation import views

app_name = "activation"

urlpatterns = [
    path("online", views.OnlineActivationView.as_view(), name="online"),
    path("revalidate", views.RevalidateView.as_view(), name="revalidate"),
    path(
        "offline/request/validate",
        views.ValidateOfflineRequestView.as_view(),
        name="offline-request-validate",
    ),
]
