"""
Notification service layer.

Services:
    PushDeliveryService: Sends a notification to every device of an account
    NotificationEventService: Writes the append-only event store
    DeviceRegistrationService: Registers and removes device tokens

Design Principles:
    - Per-device failures never raise out of send_to_account(); they are
      logged and, for dead tokens, the registration is deleted
    - Sends run in batches of PUSH_BATCH_SIZE on a thread pool; each batch
      settles completely before the next one starts
    - Database work stays on the calling thread: workers only talk to APNs
    - The push gateway is injected so tests can substitute a fake

Usage:
    from notifications.services import PushDeliveryService

    report = PushDeliveryService().send_to_account("0xapp...", payload)
    report.sent, report.failed, report.removed
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db import transaction

from approvals.models import AppAccount
from core.exceptions import NotFoundError, ValidationError
from core.services import BaseService, ServiceResult
from notifications.gateway import PushResult, get_gateway, truncate_token
from notifications.models import (
    DeviceRegistration,
    NotificationEvent,
    NotificationEventType,
)
from notifications.sanitizer import sanitize
from notifications.types import NotificationKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from notifications.gateway import ApnsGateway
    from notifications.types import NotificationPayload, SanitizedNotification

logger = logging.getLogger(__name__)

DEVICE_TOKEN_RE = re.compile(r"^[0-9a-fA-F]{64}$")


# =============================================================================
# Push delivery
# =============================================================================


@dataclass
class DeliveryReport:
    """What happened when sending to one account."""

    user_id: str
    devices: int = 0
    sent: int = 0
    failed: int = 0
    removed: int = 0
    results: list[PushResult] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "devices": self.devices,
            "sent": self.sent,
            "failed": self.failed,
            "removed": self.removed,
        }


class PushDeliveryService(BaseService):
    """
    Delivers notifications to all devices registered by an account.

    Args:
        gateway: Push gateway; the process-wide APNs gateway by default
        batch_size: Concurrent sends per batch (settings.PUSH_BATCH_SIZE)
    """

    def __init__(self, gateway: ApnsGateway | None = None, batch_size: int | None = None):
        self.gateway = gateway or get_gateway()
        self.batch_size = batch_size or settings.PUSH_BATCH_SIZE

    def send_to_account(
        self, user_id: str, notification: NotificationPayload
    ) -> DeliveryReport:
        """
        Send ``notification`` to every device of ``user_id``.

        Raises:
            ConfigurationError: Push credentials are missing (first send)
        """
        user_id = user_id.lower()
        report = DeliveryReport(user_id=user_id)

        tokens = list(
            DeviceRegistration.objects.filter(user_id=user_id).values_list(
                "device_token", flat=True
            )
        )
        if not tokens:
            logger.info(f"No device tokens found for user {truncate_token(user_id)}")
            return report

        report.devices = len(tokens)
        sanitized = sanitize(notification)

        # Surface configuration problems once, before fanning out to devices
        self.gateway.init()

        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for start in range(0, len(tokens), self.batch_size):
                batch = tokens[start : start + self.batch_size]
                futures = [
                    executor.submit(self._send_one, token, sanitized) for token in batch
                ]
                results = [future.result() for future in futures]
                for result in results:
                    self._handle_result(user_id, result, report)

        logger.info(
            f"Sent notification to {report.sent}/{report.devices} device(s) "
            f"for user {truncate_token(user_id)}"
        )
        return report

    def _send_one(self, device_token: str, sanitized: SanitizedNotification) -> PushResult:
        try:
            return self.gateway.send(device_token, sanitized)
        except Exception as exc:
            logger.exception(f"APNs send raised for {truncate_token(device_token)}")
            return PushResult(device_token=device_token, sent=False, reason=str(exc))

    def _handle_result(
        self, user_id: str, result: PushResult, report: DeliveryReport
    ) -> None:
        report.results.append(result)
        if result.sent:
            report.sent += 1
            return

        report.failed += 1
        logger.warning(
            f"APNs send failed for {truncate_token(result.device_token)} "
            f"status={result.status} reason={result.reason}"
        )
        if not result.is_invalid_device:
            return

        try:
            deleted, _ = DeviceRegistration.objects.filter(
                user_id=user_id, device_token=result.device_token
            ).delete()
        except Exception:
            logger.exception(
                f"Failed to remove invalid device token {truncate_token(result.device_token)}"
            )
            return

        if deleted:
            report.removed += deleted
            logger.info(f"Removed invalid device token {truncate_token(result.device_token)}")


# =============================================================================
# Event store
# =============================================================================


class NotificationEventService(BaseService):
    """Writes NotificationEvent rows for delivered notifications."""

    @staticmethod
    def event_fields(notification: NotificationPayload) -> dict[str, Any]:
        """
        Column values for an event built from a notification.

        Linkage columns come from the caller's data map; display columns
        (title, body, badge, sound, data) are the sanitized values.
        """
        data = notification.data if isinstance(notification.data, dict) else {}
        sanitized = sanitize(notification)

        event_type = data.get("type")
        if event_type not in NotificationEventType.values:
            event_type = NotificationEventType.SYSTEM

        actor = data.get("actorAddress")
        parent_id = data.get("parentId")
        reaction_type = data.get("reactionType")
        chain_id = data.get("chainId")
        if isinstance(chain_id, bool) or not isinstance(chain_id, int):
            chain_id = None

        group_key = None
        if event_type == NotificationKind.REACTION:
            group_key = f"reaction:{parent_id or ''}:{reaction_type or event_type}"

        badge = sanitized.badge
        return {
            "type": event_type,
            "origin_address": actor.lower() if isinstance(actor, str) else None,
            "chain_id": chain_id,
            "subject_comment_id": _as_str(data.get("commentId")),
            "target_comment_id": _as_str(parent_id),
            "parent_comment_id": _as_str(parent_id),
            "reaction_type": _as_str(reaction_type),
            "group_key": group_key,
            "title": sanitized.title,
            "body": sanitized.body,
            "badge": int(badge) if badge is not None else None,
            "sound": sanitized.sound,
            "data": sanitized.data,
        }

    @classmethod
    def record_events(
        cls, user_ids: Iterable[str], notification: NotificationPayload
    ) -> ServiceResult[list[NotificationEvent]]:
        """Append one event per account; failures are returned, not raised."""
        user_ids = list(user_ids)

        def create() -> list[NotificationEvent]:
            fields = cls.event_fields(notification)
            with transaction.atomic():
                return NotificationEvent.objects.bulk_create(
                    [NotificationEvent(user_id=user_id, **fields) for user_id in user_ids]
                )

        return cls.capture(create, context="Failed to persist notification events")


def _as_str(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


# =============================================================================
# Device registrations
# =============================================================================


class DeviceRegistrationService(BaseService):
    """Device token registration for authenticated app accounts."""

    @staticmethod
    def validate_token(device_token: str) -> str:
        """
        Raises:
            ValidationError: Token is not 64 hexadecimal characters
        """
        if not isinstance(device_token, str) or not DEVICE_TOKEN_RE.match(device_token):
            raise ValidationError(
                "Device token must be 64 hexadecimal characters",
                error_code="INVALID_DEVICE_TOKEN",
            )
        return device_token

    @classmethod
    def register(cls, user_id: str, device_token: str) -> DeviceRegistration:
        """
        Upsert the account and its device registration.

        Registering the same token twice is a no-op.
        """
        cls.validate_token(device_token)
        user_id = user_id.lower()
        with transaction.atomic():
            account, _ = AppAccount.objects.get_or_create(id=user_id)
            registration, created = DeviceRegistration.objects.get_or_create(
                user=account, device_token=device_token
            )
            if not created:
                registration.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"{'Registered' if created else 'Refreshed'} device "
            f"{truncate_token(device_token)} for {truncate_token(user_id)}"
        )
        return registration

    @classmethod
    def unregister(cls, user_id: str, device_token: str) -> int:
        """
        Raises:
            ValidationError: Malformed token
            NotFoundError: No registration matched
        """
        cls.validate_token(device_token)
        deleted, _ = DeviceRegistration.objects.filter(
            user_id=user_id.lower(), device_token=device_token
        ).delete()
        if not deleted:
            raise NotFoundError(
                "Device token not found", error_code="DEVICE_NOT_FOUND"
            )
        return deleted

    @staticmethod
    def list_for_user(user_id: str):
        return DeviceRegistration.objects.filter(user_id=user_id.lower())
