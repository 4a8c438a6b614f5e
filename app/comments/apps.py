"""Django app configuration for comments."""

from django.apps import AppConfig


class CommentsConfig(AppConfig):
    """Configuration for the comments app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "comments"
    verbose_name = "Comments"
