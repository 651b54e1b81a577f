"""
URL configuration for client API endpoints.
"""

from django.urls import path

from api.v1.client import views

app_name = "client"

urlpatterns = [
    path("validate", views.ValidateLicenseView.as_view(), name="validate"),
    path("register", views.RegisterLicenseView.as_view(), name="register"),
    path("license-info", views.LicenseInfoView.as_view(), name="license-info"),
    path(
        "request-hwid-reset",
        views.RequestHwidResetView.as_view(),
        name="request-hwid-reset",
    ),
]
