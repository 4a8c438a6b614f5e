"""
Initial subscriptions schema.

Changes:
    - Create PostSubscription, unique per (user, target_author)
"""

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("approvals", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PostSubscription",
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
                    "target_author",
                    models.CharField(
                        db_index=True,
                        help_text="Lowercased address of the followed author",
                        max_length=64,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Subscribing app account",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="post_subscriptions",
                        to="approvals.appaccount",
                    ),
                ),
            ],
            options={
                "verbose_name": "post subscription",
                "verbose_name_plural": "post subscriptions",
                "db_table": "subscriptions_post_subscription",
                "ordering": ["-created_at"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "target_author"),
                        name="post_subscription_user_author_unique",
                    )
                ],
            },
        ),
    ]
