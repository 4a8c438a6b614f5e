"""
Views for the notification API.

Endpoints:
    Devices:
        GET    /api/v1/notifications/devices/ - List the caller's devices
        POST   /api/v1/notifications/devices/ - Register a device token
        GET    /api/v1/notifications/devices/status/ - Registration status
        DELETE /api/v1/notifications/devices/{deviceToken}/ - Remove a device

    Delivery:
        POST /api/v1/notifications/test/ - Queue a test push to the caller

    History:
        GET /api/v1/notifications/events/?limit&cursor - Grouped history page

The caller is the app account in the JWT ``sub`` claim.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from approvals.services import ApprovalService
from core.exceptions import NotFoundError, ValidationError
from notifications.history import HistoryService
from notifications.serializers import (
    DeviceRegistrationSerializer,
    DeviceStatusSerializer,
    NotificationHistorySerializer,
    RegisterDeviceSerializer,
    TestNotificationSerializer,
)
from notifications.services import DeviceRegistrationService
from notifications.tasks import deliver_notification
from notifications.types import NotificationJob, NotificationKind, NotificationPayload

logger = logging.getLogger(__name__)


def caller_id(request) -> str:
    return str(request.user.id).lower()


class DeviceRegistrationViewSet(viewsets.ViewSet):
    """
    Device token registration for the authenticated app account.

    Registering a device also refreshes the caller's approvals so the
    account can receive notifications for its authors right away.
    """

    permission_classes = [IsAuthenticated]
    lookup_field = "device_token"
    lookup_value_regex = "[^/]+"

    @extend_schema(
        operation_id="list_devices",
        summary="List registered devices",
        responses={200: DeviceRegistrationSerializer(many=True)},
        tags=["Notifications - Devices"],
    )
    def list(self, request):
        devices = DeviceRegistrationService.list_for_user(caller_id(request))
        return Response(
            {
                "success": True,
                "devices": DeviceRegistrationSerializer(devices, many=True).data,
            }
        )

    @extend_schema(
        operation_id="register_device",
        summary="Register a device token",
        request=RegisterDeviceSerializer,
        responses={
            201: DeviceRegistrationSerializer,
            400: OpenApiResponse(description="Invalid device token format"),
        },
        tags=["Notifications - Devices"],
    )
    def create(self, request):
        serializer = RegisterDeviceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = caller_id(request)
        registration = DeviceRegistrationService.register(
            user_id, serializer.validated_data["deviceToken"]
        )

        try:
            ApprovalService.sync_approvals_for_app(user_id)
        except Exception:
            logger.exception("Failed to sync approvals during device registration")

        return Response(
            {
                "success": True,
                "device": DeviceRegistrationSerializer(registration).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="remove_device",
        summary="Remove a device token",
        responses={
            200: OpenApiResponse(description="Device token removed"),
            400: OpenApiResponse(description="Invalid device token format"),
            404: OpenApiResponse(description="Device token not found for this user"),
        },
        tags=["Notifications - Devices"],
    )
    def destroy(self, request, device_token=None):
        try:
            DeviceRegistrationService.unregister(caller_id(request), device_token)
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except NotFoundError as e:
            return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

        return Response({"success": True, "message": "Device token removed successfully"})

    @extend_schema(
        operation_id="device_status",
        summary="Device registration status",
        responses={200: DeviceStatusSerializer},
        tags=["Notifications - Devices"],
    )
    @action(detail=False, methods=["get"], url_path="status")
    def registration_status(self, request):
        tokens = list(
            DeviceRegistrationService.list_for_user(caller_id(request)).values_list(
                "device_token", flat=True
            )
        )
        serializer = DeviceStatusSerializer(
            {"registered": bool(tokens), "count": len(tokens), "tokens": tokens}
        )
        return Response({"success": True, **serializer.data})


class TestNotificationView(APIView):
    """Queue a push to every device of the caller, bypassing resolution."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="send_test_notification",
        summary="Send a test notification",
        request=TestNotificationSerializer,
        responses={202: OpenApiResponse(description="Test notification queued")},
        tags=["Notifications - Delivery"],
    )
    def post(self, request):
        serializer = TestNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = caller_id(request)
        job = NotificationJob(
            author=user_id,
            notification=NotificationPayload(
                title=serializer.validated_data["title"],
                body=serializer.validated_data["body"],
                data={"type": NotificationKind.TEST},
            ),
            target_user_ids=[user_id],
        )
        deliver_notification.delay(job.to_dict())

        return Response(
            {"success": True, "message": "Test notification queued"},
            status=status.HTTP_202_ACCEPTED,
        )


class NotificationEventsView(APIView):
    """Paginated, grouped notification history of the caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_notification_events",
        summary="Notification history",
        description=(
            "Newest first. Reactions to the same post are grouped into one "
            "item. Pass nextCursor back as cursor to read the next page."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Raw events per page (1-200, default 50)",
                required=False,
            ),
            OpenApiParameter(
                name="cursor",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Event id returned as nextCursor by the previous page",
                required=False,
            ),
        ],
        responses={
            200: NotificationHistorySerializer,
            400: OpenApiResponse(description="Invalid limit or cursor"),
            500: OpenApiResponse(description="Failed to load notification events"),
        },
        tags=["Notifications - History"],
    )
    def get(self, request):
        try:
            page = HistoryService.get_events(
                caller_id(request),
                limit=request.query_params.get("limit"),
                cursor=request.query_params.get("cursor") or None,
            )
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Failed to load notification events")
            return Response(
                {"error": "Failed to load notification events"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"success": True, **page.to_dict()})
