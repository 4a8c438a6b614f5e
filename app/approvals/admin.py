"""Django admin configuration for approval models."""

from django.contrib import admin

from approvals.models import AppAccount, Approval


@admin.register(AppAccount)
class AppAccountAdmin(admin.ModelAdmin):
    list_display = ["id", "created_at", "updated_at"]
    search_fields = ["id"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Approval)
class ApprovalAdmin(admin.ModelAdmin):
    """
    Admin configuration for Approval.

    Rows are mirrored from the indexer, so everything is read-only.
    """

    list_display = ["author", "app", "chain_id", "is_active", "updated_at"]
    list_filter = ["chain_id", ("deleted_at", admin.EmptyFieldListFilter)]
    search_fields = ["author", "app__id", "tx_hash"]
    raw_id_fields = ["app"]
    readonly_fields = [
        "remote_id",
        "author",
        "app",
        "chain_id",
        "tx_hash",
        "log_index",
        "created_at",
        "updated_at",
        "deleted_at",
    ]

    @admin.display(boolean=True, description="Active")
    def is_active(self, obj: Approval) -> bool:
        return obj.is_active
