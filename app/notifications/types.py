"""
Message types carried on the ``notifications`` queue.

NotificationPayload is the caller-facing notification (title, body and an
arbitrary data map); it is shaped for the push transport by
notifications.sanitizer before it leaves the process.

The wire format (``to_dict``/``from_dict``) uses camelCase keys so jobs can
be produced by services written in other languages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class NotificationKind:
    """Values used for ``data["type"]`` by the enrichment worker."""

    REPLY = "reply"
    REACTION = "reaction"
    MENTION = "mention"
    TEST = "test"
    SYSTEM = "system"


@dataclass
class NotificationPayload:
    title: str
    body: str
    badge: int | None = None
    sound: str | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> NotificationPayload:
        return cls(
            title=payload.get("title", ""),
            body=payload.get("body", ""),
            badge=payload.get("badge"),
            sound=payload.get("sound"),
            data=payload.get("data"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"title": self.title, "body": self.body}
        if self.badge is not None:
            result["badge"] = self.badge
        if self.sound is not None:
            result["sound"] = self.sound
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass
class NotificationJob:
    """
    A notification addressed to an author.

    ``author`` is the content author; the fan-out worker resolves it to the
    app accounts that post on the author's behalf. When ``target_user_ids``
    is set, resolution is skipped and those accounts are sent to directly.
    """

    author: str
    notification: NotificationPayload
    target_user_ids: list[str] | None = None
    chain_id: int | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> NotificationJob:
        return cls(
            author=payload.get("author", ""),
            notification=NotificationPayload.from_dict(payload["notification"]),
            target_user_ids=payload.get("targetUserIds") or None,
            chain_id=payload.get("chainId"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "author": self.author,
            "notification": self.notification.to_dict(),
        }
        if self.target_user_ids:
            result["targetUserIds"] = list(self.target_user_ids)
        if self.chain_id is not None:
            result["chainId"] = self.chain_id
        return result


@dataclass
class SanitizedNotification:
    """Push-safe view of a NotificationPayload. Computed per send, never stored as-is."""

    title: str
    body: str
    badge: int | float | None = None
    sound: str | None = None
    data: dict[str, Any] | None = field(default=None)
