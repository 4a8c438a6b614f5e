"""
Celery tasks for notification fan-out.

Tasks:
    deliver_notification: Resolve the destination accounts of a
    NotificationJob and push to every device they registered

Design:
    - Tasks receive the job's wire dict (camelCase keys)
    - A job with ``targetUserIds`` is sent to those accounts directly
    - Otherwise the author is resolved to app accounts through active
      approvals; an empty resolution is logged and the job succeeds
    - Every account is attempted: one account's failure is logged and
      never stops the others or fails the job
    - Resolved jobs are recorded in the event store before sending

Usage:
    from notifications.tasks import deliver_notification

    deliver_notification.delay(job.to_dict())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from celery import shared_task

from approvals.services import ApprovalService
from core.exceptions import ConfigurationError
from notifications.gateway import truncate_token
from notifications.services import NotificationEventService, PushDeliveryService
from notifications.types import NotificationJob

if TYPE_CHECKING:
    from notifications.types import NotificationPayload

logger = logging.getLogger(__name__)


def _job_chain_id(job: NotificationJob) -> int | None:
    if job.chain_id is not None:
        return job.chain_id
    chain_id = (job.notification.data or {}).get("chainId")
    if isinstance(chain_id, int) and not isinstance(chain_id, bool):
        return chain_id
    return None


def dispatch_to_accounts(
    user_ids: list[str],
    notification: NotificationPayload,
    delivery: PushDeliveryService | None = None,
) -> dict[str, int]:
    """
    Send to every account, isolating failures per account.

    Returns:
        Counts of accounts attempted, delivered without error and failed
    """
    delivery = delivery or PushDeliveryService()
    summary = {"attempted": 0, "succeeded": 0, "failed": 0}

    for user_id in user_ids:
        summary["attempted"] += 1
        try:
            delivery.send_to_account(user_id, notification)
        except ConfigurationError as e:
            summary["failed"] += 1
            logger.error(f"Push not configured, send to {truncate_token(user_id)} aborted: {e}")
        except Exception:
            summary["failed"] += 1
            logger.exception(f"Failed to send notification to {truncate_token(user_id)}")
        else:
            summary["succeeded"] += 1

    return summary


def handle_notification_job(
    job: NotificationJob, delivery: PushDeliveryService | None = None
) -> dict[str, Any]:
    """Fan a notification job out to its destination accounts."""
    if job.target_user_ids:
        user_ids = list(dict.fromkeys(u.lower() for u in job.target_user_ids))
        logger.info(f"Sending notification directly to {len(user_ids)} account(s)")
        return {
            "author": job.author,
            "accounts": len(user_ids),
            **dispatch_to_accounts(user_ids, job.notification, delivery),
        }

    accounts = ApprovalService.resolve_apps_for_author(job.author, _job_chain_id(job))
    if not accounts:
        logger.info(f"No approved app accounts found for author {job.author}, skipping")
        return {"author": job.author, "accounts": 0, "attempted": 0, "succeeded": 0, "failed": 0}

    user_ids = [account.id for account in accounts]

    recorded = NotificationEventService.record_events(user_ids, job.notification)
    if not recorded:
        logger.warning(f"Notification events not recorded for author {job.author}")

    summary = dispatch_to_accounts(user_ids, job.notification, delivery)
    logger.info(
        f"Dispatched notification to {len(user_ids)} app account(s) for author {job.author}"
    )
    return {"author": job.author, "accounts": len(user_ids), **summary}


@shared_task(name="notifications.deliver_notification")
def deliver_notification(job: dict) -> dict:
    """
    Deliver a NotificationJob.

    Args:
        job: NotificationJob wire dict

    Returns:
        Summary of the fan-out (accounts, attempted, succeeded, failed)
    """
    return handle_notification_job(NotificationJob.from_dict(job))
