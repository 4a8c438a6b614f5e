"""Django app configuration for notifications."""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """
    Configuration for the notifications app.

    Importing the gateway module on ready() connects its worker_shutdown
    receiver, so the APNs connection is closed when a Celery worker stops.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Push Notifications"

    def ready(self):
        from notifications import gateway  # noqa: F401
