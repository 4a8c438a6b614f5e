"""
Approval resolver service.

Services:
    ApprovalService: Syncs the local approval mirror from the indexer and
    answers fan-out queries

Design Principles:
    - Sync is best-effort. Each step (account upsert, remote fetch,
      approvals upsert, local count) produces its own ServiceResult and a
      failed step never stops the next one
    - The final answer always comes from local state, so a failed remote
      fetch degrades to whatever was synced earlier
    - Resolution only returns app accounts that could receive a push
      (at least one registered device)

Usage:
    from approvals.services import ApprovalService

    outcome = ApprovalService.sync_approvals_for_app("0xApp...", chain_id=8453)
    outcome.approved, outcome.approvals_count

    apps = ApprovalService.resolve_apps_for_author("0xAuthor...", chain_id=8453)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db import transaction
from django.utils.dateparse import parse_datetime

from approvals.models import AppAccount, Approval
from comments.indexer import IndexerClient
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from datetime import datetime

APPROVALS_PAGE_SIZE = 50
MAX_APPROVAL_PAGES = 20


@dataclass(frozen=True)
class ApprovalSyncOutcome:
    approved: bool
    approvals_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"approved": self.approved, "approvalsCount": self.approvals_count}


def _parse_timestamp(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    return parse_datetime(value)


class ApprovalService(BaseService):
    """
    Service for the author -> app approval mirror.

    Methods:
        upsert_account: Ensure an AppAccount row exists
        fetch_remote_approvals: Page through the indexer's approvals for an app
        upsert_approvals: Write remote approvals into the local mirror
        count_active: Count active approvals for an app on a chain
        sync_approvals_for_app: All of the above, fault-isolated
        resolve_apps_for_author: Fan-out destinations for an author
    """

    @classmethod
    def upsert_account(cls, address: str) -> ServiceResult[AppAccount]:
        def upsert() -> AppAccount:
            with transaction.atomic():
                return AppAccount.objects.get_or_create(id=address.lower())[0]

        return cls.capture(upsert, context=f"Failed to upsert account {address}")

    @classmethod
    def fetch_remote_approvals(
        cls,
        app: str,
        chain_id: int,
        client: IndexerClient | None = None,
    ) -> ServiceResult[list[dict[str, Any]]]:
        """Fetch every approval granted to ``app``, 50 per page."""

        def fetch() -> list[dict[str, Any]]:
            indexer = client or IndexerClient()
            approvals: list[dict[str, Any]] = []
            for page in range(MAX_APPROVAL_PAGES):
                results = indexer.get_approvals(
                    app,
                    chain_id,
                    limit=APPROVALS_PAGE_SIZE,
                    offset=page * APPROVALS_PAGE_SIZE,
                )
                approvals.extend(results)
                if len(results) < APPROVALS_PAGE_SIZE:
                    break
            else:
                cls.get_logger().warning(
                    f"Stopped paging approvals for {app} after {MAX_APPROVAL_PAGES} pages"
                )
            return approvals

        return cls.capture(fetch, context=f"Failed to fetch approvals for {app}")

    @classmethod
    def upsert_approvals(
        cls, app: str, approvals: list[dict[str, Any]]
    ) -> ServiceResult[int]:
        """
        Mirror remote approvals; the remote timestamps are the source of truth.

        Returns:
            ServiceResult with the number of rows written
        """

        def upsert() -> int:
            written = 0
            with transaction.atomic():
                for remote in approvals:
                    author = str(remote["author"]).lower()
                    updated_at = _parse_timestamp(remote.get("updatedAt"))
                    values: dict[str, Any] = {
                        "remote_id": str(remote.get("id") or ""),
                        "tx_hash": remote.get("txHash") or "",
                        "log_index": remote.get("logIndex"),
                        "deleted_at": _parse_timestamp(remote.get("deletedAt")),
                    }
                    if updated_at is not None:
                        values["updated_at"] = updated_at
                    create_values = dict(values)
                    created_at = _parse_timestamp(remote.get("createdAt"))
                    if created_at is not None:
                        create_values["created_at"] = created_at

                    Approval.objects.update_or_create(
                        author=author,
                        app_id=app,
                        chain_id=int(remote["chainId"]),
                        defaults=values,
                        create_defaults=create_values,
                    )
                    written += 1
            return written

        return cls.capture(upsert, context=f"Failed to upsert approvals for {app}")

    @classmethod
    def count_active(cls, app: str, chain_id: int) -> ServiceResult[int]:
        return cls.capture(
            lambda: Approval.objects.active().filter(app_id=app, chain_id=chain_id).count(),
            context=f"Failed to count approvals for {app}",
        )

    @classmethod
    def sync_approvals_for_app(
        cls,
        app_address: str,
        chain_id: int | None = None,
        client: IndexerClient | None = None,
    ) -> ApprovalSyncOutcome:
        """
        Refresh the local mirror for ``app_address`` and report its status.

        Returns ``approved=False, approvals_count=0`` only when the local
        count itself fails; every other failure is logged and skipped.
        """
        logger = cls.get_logger()
        app = app_address.lower()
        chain_id = chain_id if chain_id is not None else settings.DEFAULT_CHAIN_ID

        cls.upsert_account(app)

        fetched = cls.fetch_remote_approvals(app, chain_id, client=client)
        if fetched and fetched.data:
            upserted = cls.upsert_approvals(app, fetched.data)
            if upserted:
                logger.info(f"Synced {upserted.data} approval(s) for {app} on {chain_id}")

        counted = cls.count_active(app, chain_id)
        if not counted:
            return ApprovalSyncOutcome(approved=False, approvals_count=0)

        return ApprovalSyncOutcome(
            approved=counted.data > 0, approvals_count=counted.data
        )

    @classmethod
    def resolve_apps_for_author(
        cls, author: str, chain_id: int | None = None
    ) -> list[AppAccount]:
        """
        Distinct app accounts with an active approval from ``author``.

        Accounts without a registered device are excluded. When ``chain_id``
        is None approvals on every chain count.
        """
        filters: dict[str, Any] = {
            "approvals__author": author.lower(),
            "approvals__deleted_at__isnull": True,
        }
        if chain_id is not None:
            filters["approvals__chain_id"] = chain_id

        return list(
            AppAccount.objects.filter(**filters)
            .filter(devices__isnull=False)
            .distinct()
            .order_by("id")
        )
