"""
Views for the subscriptions API.

Endpoints:
    GET    /api/v1/subscriptions/posts/           - List the caller's subscriptions
    GET    /api/v1/subscriptions/posts/?author=   - Subscription status for one author
    POST   /api/v1/subscriptions/posts/           - Subscribe to an author's posts
    DELETE /api/v1/subscriptions/posts/{author}/  - Unsubscribe

The caller is the app account in the JWT ``sub`` claim.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import NotFoundError, ValidationError
from notifications.views import caller_id
from subscriptions.serializers import (
    PostSubscriptionListItemSerializer,
    PostSubscriptionSerializer,
    SubscribeSerializer,
)
from subscriptions.services import PostSubscriptionService


class PostSubscriptionViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_field = "author"
    lookup_value_regex = "[^/]+"

    @extend_schema(
        operation_id="list_post_subscriptions",
        summary="List subscriptions or check one author",
        description=(
            "Without ``author`` returns every subscription of the caller, "
            "newest first. With ``author`` reports whether the caller "
            "follows that author."
        ),
        parameters=[
            OpenApiParameter("author", str, description="Author address", required=False),
        ],
        responses={
            200: PostSubscriptionSerializer(many=True),
            400: OpenApiResponse(description="Invalid author address"),
        },
        tags=["Subscriptions"],
    )
    def list(self, request):
        user_id = caller_id(request)
        author = request.query_params.get("author")

        if author is None:
            subscriptions = PostSubscriptionService.list_for_user(user_id)
            return Response(
                {
                    "success": True,
                    "subscriptions": PostSubscriptionListItemSerializer(
                        subscriptions, many=True
                    ).data,
                }
            )

        try:
            subscription = PostSubscriptionService.get(user_id, author)
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "success": True,
                "subscribed": subscription is not None,
                "subscription": (
                    PostSubscriptionSerializer(subscription).data
                    if subscription is not None
                    else None
                ),
            }
        )

    @extend_schema(
        operation_id="subscribe_to_posts",
        summary="Subscribe to an author's posts",
        request=SubscribeSerializer,
        responses={
            200: OpenApiResponse(description="Subscription id"),
            400: OpenApiResponse(description="Invalid author address"),
        },
        tags=["Subscriptions"],
    )
    def create(self, request):
        serializer = SubscribeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            subscription = PostSubscriptionService.subscribe(
                caller_id(request), serializer.validated_data["author"]
            )
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response({"success": True, "id": subscription.id})

    @extend_schema(
        operation_id="unsubscribe_from_posts",
        summary="Unsubscribe from an author's posts",
        responses={
            200: OpenApiResponse(description="Subscription removed"),
            400: OpenApiResponse(description="Invalid author address"),
            404: OpenApiResponse(description="Subscription not found"),
        },
        tags=["Subscriptions"],
    )
    def destroy(self, request, author=None):
        try:
            PostSubscriptionService.unsubscribe(caller_id(request), author)
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except NotFoundError as e:
            return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

        return Response({"success": True})
