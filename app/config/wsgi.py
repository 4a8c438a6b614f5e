"""
WSGI entry point, for deployments behind gunicorn or uWSGI.

The primary entry point is config.asgi under Uvicorn.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
