"""
Shape notification payloads for the push transport.

APNs rejects payloads above 4KB, and callers put arbitrary content into
titles, bodies and data maps. sanitize() bounds every field and keeps only
a fixed set of data keys so a push never fails because of its size.

Usage:
    from notifications.sanitizer import sanitize

    sanitized = sanitize(NotificationPayload(title=..., body=..., data={...}))
"""

from __future__ import annotations

import math
import re
from typing import Any

from notifications.types import NotificationPayload, SanitizedNotification

MAX_TITLE_LENGTH = 80
MAX_BODY_LENGTH = 220
MAX_DATA_STRING_LENGTH = 256

ELLIPSIS = "…"

ALLOWED_DATA_KEYS = frozenset(
    {"type", "commentId", "parentId", "chainId", "actorAddress", "parentAddress"}
)

HEX_IDENTIFIER_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def truncate(value: str, max_length: int) -> str:
    """Cut ``value`` to ``max_length`` characters, ending with an ellipsis."""
    if len(value) <= max_length:
        return value
    return value[: max_length - 1].rstrip() + ELLIPSIS


def _sanitize_value(value: Any) -> tuple[bool, Any]:
    """Return (keep, value) for one whitelisted data value."""
    if value is None or isinstance(value, (bool, int, float)):
        return True, value
    if isinstance(value, str):
        if HEX_IDENTIFIER_RE.match(value):
            return True, value
        return True, truncate(value, MAX_DATA_STRING_LENGTH)
    return False, None


def sanitize_data(data: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Filter a data map to the whitelisted keys.

    Nested objects and arrays are dropped. Returns None when nothing is left.
    """
    if not isinstance(data, dict):
        return None

    result: dict[str, Any] = {}
    for key, raw in data.items():
        if key not in ALLOWED_DATA_KEYS:
            continue
        keep, value = _sanitize_value(raw)
        if keep:
            result[key] = value
    return result or None


def sanitize(notification: NotificationPayload) -> SanitizedNotification:
    """Build the push-safe view of ``notification``."""
    badge = notification.badge
    if isinstance(badge, bool) or not isinstance(badge, (int, float)):
        badge = None
    elif isinstance(badge, float) and not math.isfinite(badge):
        badge = None

    sound = notification.sound if isinstance(notification.sound, str) else None

    return SanitizedNotification(
        title=truncate(str(notification.title or ""), MAX_TITLE_LENGTH),
        body=truncate(str(notification.body or ""), MAX_BODY_LENGTH),
        badge=badge,
        sound=sound,
        data=sanitize_data(notification.data),
    )
