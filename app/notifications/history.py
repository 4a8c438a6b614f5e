"""
Notification history: pagination and reaction grouping.

The history endpoint returns a user's NotificationEvents newest first. A
page is read in two stages:

1. Fetch a raw window of ``limit + 1`` rows after the cursor. The extra row
   only signals that another page exists; the cursor for the next page is
   the id of the last row in the window.
2. Group the window for display. Reactions sharing a group key collapse
   into a single item placed where the earliest one appeared; everything
   else keeps its position.

Grouping can shrink a page below ``limit`` items. The cursor still
advances over the whole raw window, so no event is skipped or repeated.

Usage:
    from notifications.history import HistoryService

    page = HistoryService.get_events(user_id, limit=50, cursor=None)
    page.to_dict()  # {"events": [...], "nextCursor": "..."}
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.db.models import Q

from comments.profiles import fetch_cached_profiles, profile_display_name
from core.exceptions import ValidationError
from core.services import BaseService
from notifications.models import NotificationEvent, NotificationEventType

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_LIMIT = 50
MAX_LIMIT = 200

MAX_GROUP_ACTOR_PROFILES = 10
MAX_GROUP_ACTOR_ADDRESSES = 6

LIKE_REACTION = "like"


# =============================================================================
# Serialization
# =============================================================================


def _parent_address(event: NotificationEvent) -> str | None:
    data = event.data if isinstance(event.data, dict) else {}
    parent = data.get("parentAddress")
    return parent.lower() if isinstance(parent, str) else None


def serialize_event(
    event: NotificationEvent, profiles: dict[str, dict[str, Any]]
) -> dict[str, Any]:
    """Client representation of one stored event."""
    parent_address = _parent_address(event)
    return {
        "id": str(event.id),
        "type": event.type,
        "originAddress": event.origin_address,
        "chainId": event.chain_id,
        "subjectCommentId": event.subject_comment_id,
        "targetCommentId": event.target_comment_id,
        "parentCommentId": event.parent_comment_id,
        "reactionType": event.reaction_type,
        "groupKey": event.group_key,
        "title": event.title,
        "body": event.body,
        "badge": event.badge,
        "sound": event.sound,
        "data": event.data,
        "createdAt": event.created_at.isoformat(),
        "actorProfile": profiles.get(event.origin_address or ""),
        "parentProfile": profiles.get(parent_address or ""),
    }


# =============================================================================
# Grouping
# =============================================================================


def _is_groupable(event: dict[str, Any]) -> bool:
    return event.get("type") == NotificationEventType.REACTION and bool(event.get("groupKey"))


def _distinct_actors(events: Sequence[dict[str, Any]]) -> list[str]:
    actors: dict[str, None] = {}
    for event in events:
        address = event.get("originAddress")
        if isinstance(address, str) and address:
            actors.setdefault(address.lower(), None)
    return list(actors)


def _group_title(primary_name: str, others: int, reaction_type: str | None) -> str:
    verb = "liked" if reaction_type == LIKE_REACTION else "reacted to"
    if others <= 0:
        return f"{primary_name} {verb} your post"
    noun = "other" if others == 1 else "others"
    return f"{primary_name} and {others} {noun} {verb} your post"


def build_group(
    members: Sequence[dict[str, Any]], profiles: dict[str, dict[str, Any]]
) -> dict[str, Any]:
    """Collapse reactions sharing a group key into one display item."""
    template = members[0]
    actors = _distinct_actors(members)
    primary = actors[0] if actors else None

    item = dict(template)
    item["title"] = _group_title(
        profile_display_name(profiles.get(primary or ""), primary),
        len(actors) - 1,
        template.get("reactionType"),
    )
    item["body"] = template.get("body", "")
    item["actorProfiles"] = [
        profiles.get(address) or {"address": address}
        for address in actors[1 : MAX_GROUP_ACTOR_PROFILES + 1]
    ]
    item["data"] = {
        **(template.get("data") or {}),
        "actorAddresses": actors[:MAX_GROUP_ACTOR_ADDRESSES],
        "actorCount": len(actors),
    }
    return item


def group_events(
    events: Sequence[dict[str, Any]],
    profiles: dict[str, dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """
    Order-preserving reaction grouping over one raw window.

    Passthrough events keep their index; each reaction group takes the
    index of its earliest member. The result is sorted by that index.
    """
    profiles = profiles or {}
    positioned: list[tuple[int, dict[str, Any]]] = []
    buckets: dict[str, list[tuple[int, dict[str, Any]]]] = {}

    for index, event in enumerate(events):
        if _is_groupable(event):
            buckets.setdefault(event["groupKey"], []).append((index, event))
        else:
            positioned.append((index, event))

    for members in buckets.values():
        first_index = min(index for index, _ in members)
        positioned.append((first_index, build_group([e for _, e in members], profiles)))

    positioned.sort(key=lambda pair: pair[0])
    return [item for _, item in positioned]


# =============================================================================
# Read path
# =============================================================================


@dataclass
class HistoryPage:
    events: list[dict[str, Any]]
    next_cursor: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"events": self.events, "nextCursor": self.next_cursor}


def parse_limit(value: Any) -> int:
    """
    Raises:
        ValidationError: Not an integer in [1, MAX_LIMIT]
    """
    if value is None or value == "":
        return DEFAULT_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(
            "limit must be an integer", error_code="INVALID_LIMIT"
        ) from None
    if not 1 <= limit <= MAX_LIMIT:
        raise ValidationError(
            f"limit must be between 1 and {MAX_LIMIT}",
            error_code="INVALID_LIMIT",
            details={"limit": limit},
        )
    return limit


class HistoryService(BaseService):
    """Reads a page of a user's notification history."""

    @classmethod
    def _events_after(cls, user_id: str, cursor: str | None):
        queryset = NotificationEvent.objects.for_user(user_id)
        if not cursor:
            return queryset

        try:
            cursor_id = uuid.UUID(str(cursor))
            anchor = NotificationEvent.objects.only("id", "created_at").get(
                id=cursor_id, user_id=user_id
            )
        except (ValueError, NotificationEvent.DoesNotExist):
            raise ValidationError(
                "Invalid cursor", error_code="INVALID_CURSOR", details={"cursor": cursor}
            ) from None

        return queryset.filter(
            Q(created_at__lt=anchor.created_at)
            | Q(created_at=anchor.created_at, id__lt=anchor.id)
        )

    @classmethod
    def _load_profiles(cls, window: Sequence[NotificationEvent]) -> dict[str, dict[str, Any]]:
        addresses: list[str] = []
        for event in window:
            if event.origin_address:
                addresses.append(event.origin_address)
            parent = _parent_address(event)
            if parent:
                addresses.append(parent)
        try:
            return fetch_cached_profiles(addresses)
        except Exception:
            # Profiles are display-only
            cls.get_logger().warning("Failed to load author profiles", exc_info=True)
            return {}

    @classmethod
    def get_events(
        cls, user_id: str, limit: int = DEFAULT_LIMIT, cursor: str | None = None
    ) -> HistoryPage:
        """
        One page of grouped history for ``user_id``.

        Raises:
            ValidationError: Bad limit or unknown cursor
            django.db.DatabaseError: Store failure (the page is never partial)
        """
        limit = parse_limit(limit)
        user_id = user_id.lower()

        rows = list(cls._events_after(user_id, cursor)[: limit + 1])
        has_more = len(rows) > limit
        window = rows[:limit]
        next_cursor = str(window[-1].id) if has_more else None

        profiles = cls._load_profiles(window)
        serialized = [serialize_event(event, profiles) for event in window]

        return HistoryPage(events=group_events(serialized, profiles), next_cursor=next_cursor)
