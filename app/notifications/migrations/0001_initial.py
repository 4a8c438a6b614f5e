"""
Initial notifications schema.

Changes:
    - Create DeviceRegistration, unique per (user, device_token)
    - Create NotificationEvent with the (user, -created_at, -id) history index
"""

import uuid

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("approvals", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DeviceRegistration",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "device_token",
                    models.CharField(
                        help_text="APNs device token (hex)",
                        max_length=200,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="App account that registered the device",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="devices",
                        to="approvals.appaccount",
                    ),
                ),
            ],
            options={
                "verbose_name": "device registration",
                "verbose_name_plural": "device registrations",
                "db_table": "notifications_device_registration",
                "ordering": ["-created_at"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "device_token"),
                        name="device_registration_user_token_unique",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="NotificationEvent",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("reply", "Reply"),
                            ("reaction", "Reaction"),
                            ("mention", "Mention"),
                            ("test", "Test"),
                            ("system", "System"),
                        ],
                        default="system",
                        max_length=20,
                    ),
                ),
                (
                    "origin_address",
                    models.CharField(
                        blank=True,
                        help_text="Lowercased address of the actor",
                        max_length=64,
                        null=True,
                    ),
                ),
                ("chain_id", models.BigIntegerField(blank=True, null=True)),
                (
                    "subject_comment_id",
                    models.CharField(blank=True, max_length=128, null=True),
                ),
                (
                    "target_comment_id",
                    models.CharField(blank=True, max_length=128, null=True),
                ),
                (
                    "parent_comment_id",
                    models.CharField(blank=True, max_length=128, null=True),
                ),
                (
                    "reaction_type",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                (
                    "group_key",
                    models.CharField(
                        blank=True,
                        help_text="Set for groupable events: reaction:{parentId}:{reactionType}",
                        max_length=255,
                        null=True,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("body", models.TextField(blank=True, default="")),
                ("badge", models.IntegerField(blank=True, null=True)),
                ("sound", models.CharField(blank=True, max_length=64, null=True)),
                ("data", models.JSONField(blank=True, null=True)),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True, default=django.utils.timezone.now
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Account the notification was emitted to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notification_events",
                        to="approvals.appaccount",
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification_event",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["user", "-created_at", "-id"],
                        name="notif_event_user_created_idx",
                    )
                ],
            },
        ),
    ]
