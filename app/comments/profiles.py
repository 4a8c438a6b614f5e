"""
Author profile cache.

Profiles are cached by lowercased address whenever a comment is loaded so
the notification history can show names and avatars without calling the
indexer at read time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.conf import settings

from comments.types import AuthorProfile, truncate_address
from core.cache import get_many_json, set_json

if TYPE_CHECKING:
    from collections.abc import Iterable


def profile_cache_key(address: str) -> str:
    return f"ecp:author:{address.lower()}"


def cache_author_profile(profile: AuthorProfile) -> None:
    set_json(
        profile_cache_key(profile.address),
        profile.raw or {"address": profile.address},
        ttl=settings.AUTHOR_PROFILE_CACHE_TTL_SECONDS,
    )


def fetch_cached_profiles(addresses: Iterable[str]) -> dict[str, dict[str, Any]]:
    """
    Batched profile lookup.

    Returns:
        Mapping of lowercased address to cached profile JSON; addresses
        without a cached profile are absent.
    """
    lowered = list(dict.fromkeys(a.lower() for a in addresses if a))
    if not lowered:
        return {}
    found = get_many_json(profile_cache_key(a) for a in lowered)
    return {
        address: found[profile_cache_key(address)]
        for address in lowered
        if profile_cache_key(address) in found
    }


def profile_display_name(profile: dict[str, Any] | None, address: str | None) -> str:
    """Display name from cached profile JSON, falling back to the address."""
    if profile:
        return AuthorProfile.from_api(
            {"address": address or profile.get("address", ""), **profile}
        ).username
    if address:
        return truncate_address(address)
    return "Someone"
