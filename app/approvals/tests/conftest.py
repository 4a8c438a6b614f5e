"""
Test configuration and fixtures for approval tests.

This module provides:
- A fake indexer client serving approval pages from memory
- Remote approval payload builder
- An API client authenticated as an app account
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from comments.indexer import TransientFetchError

APP = "0x" + "ab" * 20


def remote_approval(author, app=APP, chain_id=8453, deleted_at=None, **extra):
    return {
        "id": f"{author}:{app}:{chain_id}",
        "author": author,
        "app": app,
        "chainId": chain_id,
        "txHash": "0x" + "0" * 64,
        "logIndex": 1,
        "createdAt": "2025-01-01T00:00:00Z",
        "updatedAt": "2025-01-02T00:00:00Z",
        "deletedAt": deleted_at,
        **extra,
    }


class FakeIndexer:
    """Implements IndexerClient.get_approvals over an in-memory list."""

    def __init__(self, approvals=None, error=None):
        self.approvals = approvals or []
        self.error = error
        self.calls = []

    def get_approvals(self, app, chain_id, limit=50, offset=0):
        self.calls.append({"app": app, "chain_id": chain_id, "limit": limit, "offset": offset})
        if self.error is not None:
            raise self.error
        return self.approvals[offset : offset + limit]


@pytest.fixture
def fake_indexer():
    return FakeIndexer()


@pytest.fixture
def failing_indexer():
    return FakeIndexer(error=TransientFetchError("Indexer returned 503 for /api/approvals"))


@pytest.fixture
def app_client():
    """API client with a JWT whose subject is APP (mixed case on purpose)."""
    token = AccessToken()
    token["sub"] = APP.upper().replace("0X", "0x")
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()
