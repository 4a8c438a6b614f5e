"""
Notification models.

- DeviceRegistration: an APNs device token registered by an app account
- NotificationEvent: append-only record of a notification emitted to an
  account, read back by the notification history endpoint

Design Decisions:
    - DeviceRegistration inherits from BaseModel (timestamps, ordering)
    - NotificationEvent is never updated, so it only has created_at
    - NotificationEvent ids are UUIDs; history pagination orders by
      (created_at, id) so ties on created_at stay stable
    - Stored title/body/data are the sanitized push values

Usage:
    from notifications.models import DeviceRegistration, NotificationEvent

    DeviceRegistration.objects.get_or_create(user=account, device_token=token)
    NotificationEvent.objects.for_user(account.id)[:50]
"""

from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone

from core.models import BaseModel


class NotificationEventType(models.TextChoices):
    REPLY = "reply", "Reply"
    REACTION = "reaction", "Reaction"
    MENTION = "mention", "Mention"
    TEST = "test", "Test"
    SYSTEM = "system", "System"


class DeviceRegistration(BaseModel):
    """
    A push device token belonging to an app account.

    Rows are deleted automatically when APNs reports the token as
    unregistered (410) or malformed (BadDeviceToken).
    """

    user = models.ForeignKey(
        "approvals.AppAccount",
        on_delete=models.CASCADE,
        related_name="devices",
        help_text="App account that registered the device",
    )
    device_token = models.CharField(
        max_length=200,
        help_text="APNs device token (hex)",
    )

    class Meta:
        db_table = "notifications_device_registration"
        verbose_name = "device registration"
        verbose_name_plural = "device registrations"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "device_token"],
                name="device_registration_user_token_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"DeviceRegistration({self.user_id}, {self.device_token[:12]}...)"


class NotificationEventQuerySet(models.QuerySet):
    def for_user(self, user_id: str):
        """Events for ``user_id`` newest first, ties broken by id."""
        return self.filter(user_id=user_id).order_by("-created_at", "-id")


class NotificationEvent(models.Model):
    """An emitted notification, as stored for the history endpoint."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "approvals.AppAccount",
        on_delete=models.CASCADE,
        related_name="notification_events",
        help_text="Account the notification was emitted to",
    )
    type = models.CharField(
        max_length=20,
        choices=NotificationEventType.choices,
        default=NotificationEventType.SYSTEM,
    )
    origin_address = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Lowercased address of the actor",
    )
    chain_id = models.BigIntegerField(null=True, blank=True)
    subject_comment_id = models.CharField(max_length=128, null=True, blank=True)
    target_comment_id = models.CharField(max_length=128, null=True, blank=True)
    parent_comment_id = models.CharField(max_length=128, null=True, blank=True)
    reaction_type = models.CharField(max_length=64, null=True, blank=True)
    group_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Set for groupable events: reaction:{parentId}:{reactionType}",
    )
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True, default="")
    badge = models.IntegerField(null=True, blank=True)
    sound = models.CharField(max_length=64, null=True, blank=True)
    data = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = NotificationEventQuerySet.as_manager()

    class Meta:
        db_table = "notifications_notification_event"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["user", "-created_at", "-id"],
                name="notif_event_user_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"NotificationEvent({self.type}) -> {self.user_id}"

    @property
    def is_groupable(self) -> bool:
        return self.type == NotificationEventType.REACTION and bool(self.group_key)
