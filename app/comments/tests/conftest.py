"""
Fixtures for comment enrichment tests.

Comments are built as raw indexer payloads so the same fixtures drive the
HTTP client, the cache and the enrichment decision.
"""

import httpx
import pytest

from comments.indexer import IndexerClient

REPLIER = "0x" + "1" * 40
PARENT_AUTHOR = "0xAAA" + "a" * 37


def comment_payload(
    comment_id,
    author=REPLIER,
    content="hello",
    parent_id=None,
    references=None,
    ens_name=None,
    comment_type=0,
):
    author_payload = {"address": author}
    if ens_name:
        author_payload["ens"] = {"name": ens_name, "avatarUrl": None}
    return {
        "id": comment_id,
        "author": author_payload,
        "content": content,
        "chainId": 8453,
        "parentId": parent_id,
        "commentType": comment_type,
        "references": references or [],
        "createdAt": "2025-01-01T00:00:00.000Z",
    }


class IndexerStub:
    """
    httpx.MockTransport handler serving comments by id.

    ``failures`` makes the first N requests answer 503.
    """

    def __init__(self, comments=None, approvals=None, failures=0):
        self.comments = {c["id"]: c for c in comments or []}
        self.approvals = approvals or []
        self.failures = failures
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.failures:
            self.failures -= 1
            return httpx.Response(503, json={"error": "unavailable"})

        path = request.url.path
        if path.startswith("/api/comments/"):
            comment = self.comments.get(path.rsplit("/", 1)[-1])
            if comment is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=comment)

        if path == "/api/approvals":
            offset = int(request.url.params.get("offset", 0))
            limit = int(request.url.params.get("limit", 50))
            return httpx.Response(
                200, json={"results": self.approvals[offset : offset + limit]}
            )

        return httpx.Response(404)

    def client(self) -> IndexerClient:
        return IndexerClient(
            base_url="https://indexer.test", transport=httpx.MockTransport(self)
        )


@pytest.fixture
def sleeps():
    """Records backoff delays instead of sleeping; pass ``sleep=sleeps.append``."""
    return []
