"""
Read-through result cache on top of Django's cache backend (Redis).

Values are stored as JSON text so that entries stay readable by other
services sharing the Redis instance. Python's json module keeps integers
at arbitrary precision in both directions, so on-chain quantities such as
token amounts or block numbers survive a round trip exactly.

There is no locking: two workers missing the same key concurrently will
both run ``compute`` and both write the result. Only use this for
idempotent computations.

Usage:
    from core.cache import with_cache

    comment = with_cache(
        f"ecp:comment:{chain_id}:{comment_id}",
        ttl=60 * 60 * 24 * 2,
        compute=lambda: client.get_comment(chain_id, comment_id),
    )
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, TypeVar

from django.core.cache import cache

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from typing import Any

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60 * 60 * 24


def dumps(value: Any) -> str:
    """Serialize a JSON-like value for storage."""
    return json.dumps(value, separators=(",", ":"))


def loads(raw: str | bytes) -> Any:
    """Deserialize a stored value; integers come back at full precision."""
    return json.loads(raw)


def with_cache(
    key: str,
    compute: Callable[[], T],
    ttl: int = DEFAULT_TTL_SECONDS,
    disable_cache: bool = False,
) -> T:
    """
    Return the cached value for ``key`` or compute, store and return it.

    Args:
        key: Cache key
        compute: Zero-argument callable producing a JSON-serializable value
        ttl: Time to live in seconds for a freshly computed value
        disable_cache: Skip the read (the result is still written)

    Returns:
        The cached or freshly computed value

    Raises:
        Whatever ``compute`` raises; failures are never cached.
    """
    if not disable_cache:
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return loads(cached)

    result = compute()
    cache.set(key, dumps(result), timeout=ttl)
    return result


def set_json(key: str, value: Any, ttl: int = DEFAULT_TTL_SECONDS) -> None:
    """Store a JSON-like value under ``key``."""
    cache.set(key, dumps(value), timeout=ttl)


def get_many_json(keys: Iterable[str]) -> dict[str, Any]:
    """
    Batched lookup of JSON values.

    Returns:
        Mapping of key to decoded value for the keys that were present.
    """
    found = cache.get_many(list(keys))
    return {key: loads(raw) for key, raw in found.items()}
