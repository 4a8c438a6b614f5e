"""Tests for the post subscriptions API."""

import pytest
from rest_framework.test import APIClient

from subscriptions.models import PostSubscription
from subscriptions.tests.conftest import AUTHOR, MIXED_CASE_AUTHOR
from subscriptions.tests.factories import PostSubscriptionFactory

URL = "/api/v1/subscriptions/posts/"


@pytest.mark.django_db
class TestAuthentication:
    def test_anonymous_requests_are_rejected(self):
        response = APIClient().get(URL)
        assert response.status_code == 401


@pytest.mark.django_db
class TestListSubscriptions:
    def test_lists_only_the_callers_subscriptions(
        self, account, other_account, authenticated_client
    ):
        mine = PostSubscriptionFactory(user=account, target_author=AUTHOR)
        PostSubscriptionFactory(user=other_account)

        response = authenticated_client.get(URL)

        assert response.status_code == 200
        assert response.data["success"] is True
        [item] = response.data["subscriptions"]
        assert item["id"] == mine.id
        assert item["targetAuthor"] == AUTHOR
        assert set(item) == {"id", "targetAuthor", "createdAt", "updatedAt"}

    def test_author_query_reports_subscription(self, account, authenticated_client):
        subscription = PostSubscriptionFactory(user=account, target_author=AUTHOR)

        response = authenticated_client.get(URL, {"author": MIXED_CASE_AUTHOR})

        assert response.status_code == 200
        assert response.data["subscribed"] is True
        assert response.data["subscription"]["id"] == subscription.id
        assert response.data["subscription"]["userId"] == account.id

    def test_author_query_without_subscription(self, authenticated_client):
        response = authenticated_client.get(URL, {"author": AUTHOR})

        assert response.status_code == 200
        assert response.data["subscribed"] is False
        assert response.data["subscription"] is None

    def test_invalid_author_query_is_rejected(self, authenticated_client):
        response = authenticated_client.get(URL, {"author": "0x1234"})

        assert response.status_code == 400
        assert response.data["error"] == "Invalid author address"


@pytest.mark.django_db
class TestSubscribe:
    def test_subscribe_returns_id(self, account, authenticated_client):
        response = authenticated_client.post(URL, {"author": AUTHOR}, format="json")

        assert response.status_code == 200
        subscription = PostSubscription.objects.get(user=account)
        assert response.data == {"success": True, "id": subscription.id}

    def test_subscribing_twice_keeps_one_row(self, authenticated_client):
        first = authenticated_client.post(URL, {"author": AUTHOR}, format="json")
        second = authenticated_client.post(
            URL, {"author": MIXED_CASE_AUTHOR}, format="json"
        )

        assert first.data["id"] == second.data["id"]
        assert PostSubscription.objects.count() == 1

    def test_missing_author_is_rejected(self, authenticated_client):
        response = authenticated_client.post(URL, {}, format="json")
        assert response.status_code == 400

    def test_malformed_author_is_rejected(self, authenticated_client):
        response = authenticated_client.post(URL, {"author": "bob"}, format="json")

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_AUTHOR_ADDRESS"
        assert not PostSubscription.objects.exists()


@pytest.mark.django_db
class TestUnsubscribe:
    def test_unsubscribe(self, account, authenticated_client):
        PostSubscriptionFactory(user=account, target_author=AUTHOR)

        response = authenticated_client.delete(f"{URL}{MIXED_CASE_AUTHOR}/")

        assert response.status_code == 200
        assert response.data == {"success": True}
        assert not PostSubscription.objects.exists()

    def test_unknown_subscription_is_not_found(self, authenticated_client):
        response = authenticated_client.delete(f"{URL}{AUTHOR}/")

        assert response.status_code == 404
        assert response.data["error"] == "Subscription not found"

    def test_malformed_author_is_rejected(self, authenticated_client):
        response = authenticated_client.delete(f"{URL}not-an-address/")
        assert response.status_code == 400
