"""
Serializers for the notification API.

Request and response bodies use the mobile client's camelCase keys.

Serializers:
    DeviceRegistrationSerializer: A registered device
    RegisterDeviceSerializer: Register-device request body
    DeviceStatusSerializer: Registration status response
    TestNotificationSerializer: Optional overrides for a test push
    NotificationHistorySerializer: History page response
"""

from __future__ import annotations

from rest_framework import serializers

from core.exceptions import ValidationError
from notifications.models import DeviceRegistration
from notifications.services import DeviceRegistrationService


class DeviceRegistrationSerializer(serializers.ModelSerializer):
    deviceToken = serializers.CharField(source="device_token", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = DeviceRegistration
        fields = ["id", "deviceToken", "createdAt", "updatedAt"]
        read_only_fields = fields


class RegisterDeviceSerializer(serializers.Serializer):
    deviceToken = serializers.CharField(max_length=200)

    def validate_deviceToken(self, value: str) -> str:
        try:
            return DeviceRegistrationService.validate_token(value)
        except ValidationError as e:
            raise serializers.ValidationError(e.message) from e


class DeviceStatusSerializer(serializers.Serializer):
    registered = serializers.BooleanField()
    count = serializers.IntegerField()
    tokens = serializers.ListField(child=serializers.CharField())


class TestNotificationSerializer(serializers.Serializer):
    """Body of a test push; everything is optional."""

    title = serializers.CharField(required=False, default="Test Notification")
    body = serializers.CharField(
        required=False, default="This is a test notification!"
    )


class NotificationHistorySerializer(serializers.Serializer):
    success = serializers.BooleanField()
    events = serializers.ListField(child=serializers.DictField())
    nextCursor = serializers.CharField(allow_null=True)
