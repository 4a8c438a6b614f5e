"""
Test configuration and fixtures for subscription tests.

Usage:
    def test_example(authenticated_client):
        response = authenticated_client.get("/api/v1/subscriptions/posts/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from approvals.tests.factories import AppAccountFactory

AUTHOR = "0x" + "c3" * 20
MIXED_CASE_AUTHOR = "0x" + "C3" * 20


def client_for(address: str) -> APIClient:
    token = AccessToken()
    token["sub"] = address
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def account(db):
    return AppAccountFactory(id="0x" + "a1" * 20)


@pytest.fixture
def other_account(db):
    return AppAccountFactory(id="0x" + "b2" * 20)


@pytest.fixture
def authenticated_client(account):
    """API client with a JWT whose subject is ``account``."""
    return client_for(account.id)
