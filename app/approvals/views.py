"""
Views for the approvals API.

Endpoints:
    POST /api/v1/approvals/sync/ - Refresh the caller's approvals and report
    whether any author currently approves the caller
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from approvals.serializers import (
    ApprovalSyncRequestSerializer,
    ApprovalSyncResponseSerializer,
)
from approvals.services import ApprovalService


class ApprovalSyncView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="sync_approvals",
        summary="Sync approvals for the caller",
        description=(
            "Mirrors the indexer's approvals for the authenticated app account "
            "and returns the number of active approvals on the chain. "
            "Network failures fall back to the locally mirrored approvals."
        ),
        request=ApprovalSyncRequestSerializer,
        responses={200: ApprovalSyncResponseSerializer},
        tags=["Approvals"],
    )
    def post(self, request):
        serializer = ApprovalSyncRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        chain_id = serializer.validated_data.get("chainId", settings.DEFAULT_CHAIN_ID)

        outcome = ApprovalService.sync_approvals_for_app(
            str(request.user.id), chain_id=chain_id
        )
        return Response({"success": True, **outcome.to_dict()})
