"""
Django admin configuration for subscription models.

Registers:
- PostSubscription
"""

from django.contrib import admin

from subscriptions.models import PostSubscription


@admin.register(PostSubscription)
class PostSubscriptionAdmin(admin.ModelAdmin):
    list_display = ["user", "target_author", "created_at", "updated_at"]
    search_fields = ["user__id", "target_author"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]
