"""
Celery configuration for the notification workers.

Two queues carry the pipeline's jobs:
- ``comments``: comment-activity jobs (comments.tasks.process_comment)
- ``notifications``: notification jobs (notifications.tasks.deliver_notification)

Routing lives in settings.CELERY_TASK_ROUTES. Run one worker per queue:

    celery -A config worker -Q comments
    celery -A config worker -Q notifications

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
