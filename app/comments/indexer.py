"""
Client for the external content-indexing service.

The indexer is read-only from this service's point of view. Two endpoints
are used:

- ``GET /api/comments/{commentId}?chainId=`` - a single comment
- ``GET /api/approvals?app=&chainId=&limit=&offset=`` - approvals for an app

Comment fetches run under a bounded retry policy and are memoized in the
result cache; see fetch_cached_comment().

Configuration (via settings):
- INDEXER_API_URL: Base URL of the indexer
- INDEXER_TIMEOUT_SECONDS: Per-request timeout
- COMMENT_CACHE_TTL_SECONDS: TTL for cached comments (default: 2 days)
- COMMENT_FETCH_MAX_ATTEMPTS / COMMENT_FETCH_INITIAL_DELAY_MS: retry policy

Usage:
    from comments.indexer import fetch_cached_comment

    comment = fetch_cached_comment(chain_id=8453, comment_id="0xabc...")
    print(comment.author.username, comment.content)
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from django.conf import settings

from comments.types import CommentData
from core.cache import with_cache
from core.exceptions import ExternalServiceError
from core.retry import RetryPolicy, call_with_retries

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class TransientFetchError(ExternalServiceError):
    """An indexer request failed; eligible for local retry and redelivery."""

    default_error_code = "INDEXER_FETCH_FAILED"


class IndexerClient:
    """
    Thin synchronous HTTP client for the indexer.

    A new ``httpx.Client`` is opened per call so the client is safe to use
    from any Celery worker thread. ``transport`` lets tests plug in
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.INDEXER_API_URL).rstrip("/")
        self.timeout = timeout or settings.INDEXER_TIMEOUT_SECONDS
        self.transport = transport

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        try:
            with httpx.Client(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = client.get(path, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            raise TransientFetchError(
                f"Indexer returned {exc.response.status_code} for {path}",
                details={"status": exc.response.status_code, "path": path},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TransientFetchError(
                f"Indexer request failed for {path}: {exc}",
                details={"path": path},
            ) from exc

    def get_comment(self, chain_id: int, comment_id: str) -> dict[str, Any]:
        """Fetch one comment as raw JSON."""
        return self._get(f"/api/comments/{comment_id}", {"chainId": chain_id})

    def get_approvals(
        self, app: str, chain_id: int, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        """Fetch one page of approvals granted to ``app``."""
        data = self._get(
            "/api/approvals",
            {"app": app, "chainId": chain_id, "limit": limit, "offset": offset},
        )
        results = data.get("results") if isinstance(data, dict) else None
        return results if isinstance(results, list) else []


def fetch_comment_with_retries(
    chain_id: int,
    comment_id: str,
    max_attempts: int = 5,
    initial_delay_ms: int = 1000,
    client: IndexerClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """
    Fetch a comment, retrying with exponential backoff.

    Delays between attempts are ``initial_delay_ms * 2**(attempt - 1)``
    (1s, 2s, 4s, 8s for five attempts). No retry happens after a success.

    Raises:
        TransientFetchError: The last error once every attempt failed
    """
    client = client or IndexerClient()
    policy = RetryPolicy(max_attempts=max_attempts, initial_delay_ms=initial_delay_ms)
    logger.info(
        f"Fetching comment {comment_id} on chain {chain_id} "
        f"(max_attempts={max_attempts}, initial_delay_ms={initial_delay_ms})"
    )
    return call_with_retries(
        lambda: client.get_comment(chain_id, comment_id),
        policy,
        sleep=sleep,
        description=f"fetch comment {comment_id}",
    )


def comment_cache_key(chain_id: int, comment_id: str) -> str:
    return f"ecp:comment:{chain_id}:{comment_id}"


def fetch_cached_comment(
    chain_id: int,
    comment_id: str,
    ttl: int | None = None,
    max_attempts: int | None = None,
    initial_delay_ms: int | None = None,
    client: IndexerClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CommentData:
    """
    Load a comment through the result cache.

    On a miss the comment is fetched with retries and the raw payload is
    cached; the typed CommentData is built from the cached payload either way.
    """
    payload = with_cache(
        comment_cache_key(chain_id, comment_id),
        lambda: fetch_comment_with_retries(
            chain_id,
            comment_id,
            max_attempts=max_attempts or settings.COMMENT_FETCH_MAX_ATTEMPTS,
            initial_delay_ms=initial_delay_ms
            if initial_delay_ms is not None
            else settings.COMMENT_FETCH_INITIAL_DELAY_MS,
            client=client,
            sleep=sleep,
        ),
        ttl=ttl or settings.COMMENT_CACHE_TTL_SECONDS,
    )
    return CommentData.from_api(payload)
