"""
Subscription models.

- PostSubscription: an app account following an author's posts

Usage:
    from subscriptions.models import PostSubscription

    PostSubscription.objects.filter(user_id=account_id, target_author=author)
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class PostSubscription(BaseModel):
    """Subscription of ``user`` to posts by ``target_author``."""

    user = models.ForeignKey(
        "approvals.AppAccount",
        on_delete=models.CASCADE,
        related_name="post_subscriptions",
        help_text="Subscribing app account",
    )
    target_author = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Lowercased address of the followed author",
    )

    class Meta:
        db_table = "subscriptions_post_subscription"
        verbose_name = "post subscription"
        verbose_name_plural = "post subscriptions"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "target_author"],
                name="post_subscription_user_author_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"PostSubscription({self.user_id} -> {self.target_author})"
