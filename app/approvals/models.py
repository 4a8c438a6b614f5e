"""
Approval mirror models.

- AppAccount: an actor identified by its lowercased address. Both authors
  and the delegated apps that post for them are AppAccounts; the app
  account is also the id clients authenticate as.
- Approval: author -> app delegation on one chain, mirrored from the
  indexer. Revocation is a soft delete (``deleted_at`` set).

Design Decisions:
    - Approval timestamps are copied from the indexer, so Approval does not
      use BaseModel's auto_now fields
    - ``author`` is a plain address column: authors need not be AppAccounts

Usage:
    from approvals.models import Approval

    Approval.objects.active().filter(author=address)
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.models import BaseModel


class AppAccount(BaseModel):
    """An account addressed by its lowercased hex address."""

    id = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Lowercased account address",
    )

    class Meta:
        db_table = "approvals_app_account"
        verbose_name = "app account"
        verbose_name_plural = "app accounts"

    def save(self, *args, **kwargs):
        self.id = self.id.lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.id


class ApprovalQuerySet(models.QuerySet):
    def active(self):
        return self.filter(deleted_at__isnull=True)


class Approval(models.Model):
    """
    Delegation of posting rights from ``author`` to ``app`` on ``chain_id``.

    Active while ``deleted_at`` is null.
    """

    remote_id = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="Approval id on the indexer",
    )
    author = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Lowercased address of the approving author",
    )
    app = models.ForeignKey(
        AppAccount,
        on_delete=models.CASCADE,
        related_name="approvals",
        help_text="App account approved to post for the author",
    )
    chain_id = models.BigIntegerField()
    tx_hash = models.CharField(max_length=80, blank=True, default="")
    log_index = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Revocation time; null while the approval is active",
    )

    objects = ApprovalQuerySet.as_manager()

    class Meta:
        db_table = "approvals_approval"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["author", "app", "chain_id"],
                name="approval_author_app_chain_unique",
            ),
        ]
        indexes = [
            models.Index(
                fields=["app", "chain_id", "deleted_at"],
                name="approval_app_chain_idx",
            ),
        ]

    def __str__(self) -> str:
        status = "revoked" if self.deleted_at else "active"
        return f"Approval({self.author} -> {self.app_id} on {self.chain_id}) [{status}]"

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None
