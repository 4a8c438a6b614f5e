"""
Django admin configuration for notification models.

Registers:
- DeviceRegistration
- NotificationEvent (read-only: events are append-only)
"""

from django.contrib import admin

from notifications.models import DeviceRegistration, NotificationEvent


@admin.register(DeviceRegistration)
class DeviceRegistrationAdmin(admin.ModelAdmin):
    list_display = ["user", "short_token", "created_at", "updated_at"]
    search_fields = ["user__id", "device_token"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]

    @admin.display(description="Device token")
    def short_token(self, obj: DeviceRegistration) -> str:
        return f"{obj.device_token[:12]}..."


@admin.register(NotificationEvent)
class NotificationEventAdmin(admin.ModelAdmin):
    """
    Admin configuration for NotificationEvent.

    Events are never edited; the admin is for inspection only.
    """

    list_display = ["id", "user", "type", "title", "group_key", "created_at"]
    list_filter = ["type", "created_at"]
    search_fields = ["user__id", "origin_address", "subject_comment_id", "title"]
    raw_id_fields = ["user"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
