"""
Initial approvals schema.

Changes:
    - Create AppAccount keyed by lowercased address
    - Create Approval with a unique (author, app, chain_id) constraint
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AppAccount",
            fields=[
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
                    "id",
                    models.CharField(
                        help_text="Lowercased account address",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
            ],
            options={
                "verbose_name": "app account",
                "verbose_name_plural": "app accounts",
                "db_table": "approvals_app_account",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Approval",
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
                    "remote_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Approval id on the indexer",
                        max_length=128,
                    ),
                ),
                (
                    "author",
                    models.CharField(
                        db_index=True,
                        help_text="Lowercased address of the approving author",
                        max_length=64,
                    ),
                ),
                ("chain_id", models.BigIntegerField()),
                ("tx_hash", models.CharField(blank=True, default="", max_length=80)),
                ("log_index", models.IntegerField(blank=True, null=True)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "updated_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Revocation time; null while the approval is active",
                        null=True,
                    ),
                ),
                (
                    "app",
                    models.ForeignKey(
                        help_text="App account approved to post for the author",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="approvals",
                        to="approvals.appaccount",
                    ),
                ),
            ],
            options={
                "db_table": "approvals_approval",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["app", "chain_id", "deleted_at"],
                        name="approval_app_chain_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("author", "app", "chain_id"),
                        name="approval_author_app_chain_unique",
                    )
                ],
            },
        ),
    ]
