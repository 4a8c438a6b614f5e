"""
Test configuration and fixtures for notification tests.

This module provides:
- App account and device fixtures
- A fake push gateway recording every send
- API client helpers authenticated as an app account

Usage:
    def test_example(account, authenticated_client):
        response = authenticated_client.get("/api/v1/notifications/devices/")
        assert response.status_code == 200
"""

import threading

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from approvals.tests.factories import AppAccountFactory
from notifications.gateway import PushResult


class FakeGateway:
    """
    Stands in for ApnsGateway.

    ``responses`` maps a device token to the PushResult kwargs to return;
    tokens not listed are sent successfully.
    """

    def __init__(self, responses=None, init_error=None):
        self.responses = responses or {}
        self.init_error = init_error
        self.sent = []
        self.init_calls = 0
        self._lock = threading.Lock()

    def init(self):
        with self._lock:
            self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error

    def send(self, device_token, notification):
        with self._lock:
            self.sent.append((device_token, notification))
        outcome = self.responses.get(device_token)
        if outcome is None:
            return PushResult(device_token=device_token, sent=True, status=200)
        return PushResult(device_token=device_token, **outcome)

    def shutdown(self):
        pass


# =============================================================================
# Account Fixtures
# =============================================================================


@pytest.fixture
def account(db):
    """App account the API client authenticates as."""
    return AppAccountFactory(id="0x" + "a1" * 20)


@pytest.fixture
def other_account(db):
    return AppAccountFactory(id="0x" + "b2" * 20)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


# =============================================================================
# API Client Fixtures
# =============================================================================


def client_for(address: str) -> APIClient:
    token = AccessToken()
    token["sub"] = address
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(account):
    """API client with a JWT whose subject is ``account``."""
    return client_for(account.id)
