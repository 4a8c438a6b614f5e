"""
Infrastructure endpoints.

GET /health/ is the liveness check for the web process. Workers are checked
through Celery's own inspection commands.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)

HEALTH_CACHE_KEY = "health:ping"


def _database_ok() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.warning("Health check: database unreachable", exc_info=True)
        return False
    return True


def _cache_ok() -> bool:
    try:
        cache.set(HEALTH_CACHE_KEY, "ok", timeout=5)
        return cache.get(HEALTH_CACHE_KEY) == "ok"
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        return False


def health_check(request):
    """
    Report database and cache connectivity.

    The cache backs the comment result cache, so an outage only slows the
    enrichment worker down; it is reported but does not fail the check.

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable
    """
    database = _database_ok()
    body = {
        "status": "healthy" if database else "unhealthy",
        "database": "connected" if database else "disconnected",
        "cache": "connected" if _cache_ok() else "disconnected",
    }
    return JsonResponse(body, status=200 if database else 503)
