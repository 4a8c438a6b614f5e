"""
URL configuration for the notifications API.

Routes:
    Devices:
        /devices/                 - List (GET) / register (POST)
        /devices/status/          - Registration status (GET)
        /devices/{deviceToken}/   - Remove a device (DELETE)

    /test/                        - Queue a test push (POST)
    /events/                      - Notification history (GET)
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from notifications.views import (
    DeviceRegistrationViewSet,
    NotificationEventsView,
    TestNotificationView,
)

router = DefaultRouter()
router.register(r"devices", DeviceRegistrationViewSet, basename="device")

app_name = "notifications"
urlpatterns = router.urls + [
    path("test/", TestNotificationView.as_view(), name="test-notification"),
    path("events/", NotificationEventsView.as_view(), name="events"),
]
