"""
Post subscription service.

Services:
    PostSubscriptionService: Subscribe, look up, list and unsubscribe

Authors are identified by a 0x-prefixed 20-byte hex address and stored
lowercased, so lookups are case-insensitive.

Usage:
    from subscriptions.services import PostSubscriptionService

    PostSubscriptionService.subscribe(account_id, "0xAuthor...")
    PostSubscriptionService.get(account_id, "0xauthor...")  # None if absent
"""

from __future__ import annotations

import re

from django.db import transaction

from approvals.models import AppAccount
from core.exceptions import NotFoundError, ValidationError
from core.services import BaseService
from subscriptions.models import PostSubscription

ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


class PostSubscriptionService(BaseService):
    """Post subscriptions of authenticated app accounts."""

    @staticmethod
    def validate_author(author: str) -> str:
        """
        Returns:
            The lowercased author address

        Raises:
            ValidationError: Not a 0x-prefixed 40-hex-digit address
        """
        if not isinstance(author, str) or not ADDRESS_RE.fullmatch(author):
            raise ValidationError(
                "Invalid author address", error_code="INVALID_AUTHOR_ADDRESS"
            )
        return author.lower()

    @classmethod
    def subscribe(cls, user_id: str, author: str) -> PostSubscription:
        """
        Upsert the account and its subscription to ``author``.

        Subscribing twice refreshes ``updated_at`` and returns the same row.
        """
        target = cls.validate_author(author)
        user_id = user_id.lower()
        with transaction.atomic():
            account, _ = AppAccount.objects.get_or_create(id=user_id)
            subscription, created = PostSubscription.objects.get_or_create(
                user=account, target_author=target
            )
            if not created:
                subscription.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"{'Created' if created else 'Refreshed'} subscription of "
            f"{user_id[:12]}... to {target}"
        )
        return subscription

    @classmethod
    def get(cls, user_id: str, author: str) -> PostSubscription | None:
        target = cls.validate_author(author)
        return PostSubscription.objects.filter(
            user_id=user_id.lower(), target_author=target
        ).first()

    @staticmethod
    def list_for_user(user_id: str):
        return PostSubscription.objects.filter(user_id=user_id.lower()).order_by(
            "-created_at"
        )

    @classmethod
    def unsubscribe(cls, user_id: str, author: str) -> int:
        """
        Raises:
            ValidationError: Malformed author address
            NotFoundError: No subscription matched
        """
        target = cls.validate_author(author)
        deleted, _ = PostSubscription.objects.filter(
            user_id=user_id.lower(), target_author=target
        ).delete()
        if not deleted:
            raise NotFoundError(
                "Subscription not found", error_code="SUBSCRIPTION_NOT_FOUND"
            )
        return deleted
