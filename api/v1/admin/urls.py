"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin-api"

urlpatterns = [
    path("login", views.LoginView.as_view(), name="login"),
    path("logout", views.LogoutView.as_view(), name="logout"),
    path("dashboard", views.DashboardView.as_view(), name="dashboard"),
    path("licenses", views.LicenseListView.as_view(), name="licenses"),
    path("generate-license", views.GenerateLicenseView.as_view(), name="generate-license"),
    path("bulk-generate", views.BulkGenerateView.as_view(), name="bulk-generate"),
    path("delete-license", views.DeleteLicenseView.as_view(), name="delete-license"),
    path("reset-hwid", views.ResetHwidView.as_view(), name="reset-hwid"),
    path("reset-requests", views.ResetRequestListView.as_view(), name="reset-requests"),
    path(
        "approve-hwid-reset",
        views.ApproveHwidResetView.as_view(),
        name="approve-hwid-reset",
    ),
    path("deny-hwid-reset", views.DenyHwidResetView.as_view(), name="deny-hwid-reset"),
    path("banlist", views.BanListView.as_view(), name="banlist"),
    path("ban-hwid", views.BanHwidView.as_view(), name="ban-hwid"),
    path("unban-hwid", views.UnbanHwidView.as_view(), name="unban-hwid"),
    path("activity", views.ActivityLogView.as_view(), name="activity"),
    path("settings", views.SettingsView.as_view(), name="settings"),
]
