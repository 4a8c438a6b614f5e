"""URL configuration for the approvals API."""

from django.urls import path

from approvals.views import ApprovalSyncView

app_name = "approvals"
urlpatterns = [
    path("sync/", ApprovalSyncView.as_view(), name="sync"),
]
