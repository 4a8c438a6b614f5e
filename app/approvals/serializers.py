"""Serializers for the approvals API."""

from __future__ import annotations

from rest_framework import serializers


class ApprovalSyncRequestSerializer(serializers.Serializer):
    chainId = serializers.IntegerField(required=False, min_value=1)


class ApprovalSyncResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    approved = serializers.BooleanField()
    approvalsCount = serializers.IntegerField()
