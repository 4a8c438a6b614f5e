"""
Notifications app: push delivery and notification history.

This app provides:
- DeviceRegistration model for APNs device tokens per app account
- NotificationEvent model, the append-only history of sent notifications
- The APNs gateway, payload sanitizer and per-account push delivery
- The fan-out Celery task that resolves authors to app accounts
- REST API for device registration, test pushes and grouped history

Usage:
    from notifications.tasks import deliver_notification

    deliver_notification.delay(
        NotificationJob(author="0xabc...", notification=payload).to_dict()
    )
"""
