"""
Tests for the approvals API.

Test Classes:
    TestApprovalSyncView: POST /api/v1/approvals/sync/
"""

import pytest

from approvals.services import ApprovalService

from .conftest import APP, FakeIndexer, remote_approval
from .factories import hex_address


@pytest.mark.django_db
class TestApprovalSyncView:
    url = "/api/v1/approvals/sync/"

    def test_requires_authentication(self, api_client):
        response = api_client.post(self.url, {}, format="json")

        assert response.status_code == 401

    def test_syncs_caller_on_default_chain(self, app_client, mocker):
        indexer = FakeIndexer(approvals=[remote_approval(hex_address(1))])
        mocker.patch("approvals.services.IndexerClient", return_value=indexer)
        sync = mocker.spy(ApprovalService, "sync_approvals_for_app")

        response = app_client.post(self.url, {}, format="json")

        assert response.status_code == 200
        assert response.json() == {"success": True, "approved": True, "approvalsCount": 1}
        assert sync.call_args.kwargs["chain_id"] == 8453
        assert indexer.calls[0]["app"] == APP

    def test_explicit_chain(self, app_client, mocker):
        sync = mocker.patch.object(ApprovalService, "sync_approvals_for_app")
        sync.return_value.to_dict.return_value = {"approved": False, "approvalsCount": 0}

        response = app_client.post(self.url, {"chainId": 1}, format="json")

        assert response.status_code == 200
        assert sync.call_args.kwargs["chain_id"] == 1
