"""
Tests for infrastructure endpoints.
"""

import pytest
from django.db import DatabaseError


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down(self, client, mocker):
        mocker.patch(
            "core.views.connection.cursor", side_effect=DatabaseError("connection refused")
        )

        response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
