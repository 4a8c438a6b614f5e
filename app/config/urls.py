"""
URL configuration for the notification service.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/notifications/         - Notification endpoints
        devices/                   - List / register device tokens
        devices/status/            - Registration status
        devices/{deviceToken}/     - Remove a device token
        test/                      - Queue a test push
        events/                    - Notification history
    /api/v1/approvals/             - Approval endpoints
        sync/                      - Sync approvals for the caller
    /api/v1/subscriptions/         - Post subscription endpoints
        posts/                     - List, check (?author=) or subscribe
        posts/{author}/            - Unsubscribe
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

api_v1_patterns = [
    path("notifications/", include("notifications.urls")),
    path("approvals/", include("approvals.urls")),
    path("subscriptions/", include("subscriptions.urls")),
]

urlpatterns = [
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

admin.site.site_header = "Notifications Admin"
admin.site.site_title = "Notifications Admin"
admin.site.index_title = "Accounts, approvals, devices and subscriptions"
