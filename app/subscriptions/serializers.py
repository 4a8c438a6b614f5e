"""
Serializers for the subscriptions API.

Wire format is camelCase to match the mobile client.
"""

from rest_framework import serializers

from subscriptions.models import PostSubscription


class PostSubscriptionSerializer(serializers.ModelSerializer):
    userId = serializers.CharField(source="user_id", read_only=True)
    targetAuthor = serializers.CharField(source="target_author", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PostSubscription
        fields = ["id", "userId", "targetAuthor", "createdAt", "updatedAt"]
        read_only_fields = fields


class PostSubscriptionListItemSerializer(PostSubscriptionSerializer):
    class Meta(PostSubscriptionSerializer.Meta):
        fields = ["id", "targetAuthor", "createdAt", "updatedAt"]
        read_only_fields = fields


class SubscribeSerializer(serializers.Serializer):
    """POST body: the author to follow."""

    author = serializers.CharField(max_length=64)
