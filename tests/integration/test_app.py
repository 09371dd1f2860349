# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the application factory."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_db


@pytest.fixture
def app():
    """Create the full application without starting its lifespan."""
    app = create_app()

    async def override_get_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


class TestCreateApp:
    """Tests for create_app."""

    def test_routers_mounted(self, app):
        """Test health and v1 routes are mounted."""
        routes = [route.path for route in app.routes]

        assert "/health" in routes
        assert "/ready" in routes
        assert "/api/v1/fees" in routes
        assert "/api/v1/salaries" in routes
        assert "/api/v1/cron/monthly-billing" in routes

    def test_request_id_echoed(self, client):
        """Test the X-Request-ID header is echoed back."""
        response = client.get("/ready", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        """Test a request ID is generated when absent."""
        response = client.get("/ready")

        assert len(response.headers["X-Request-ID"]) == 32

    def test_unknown_route_error_body(self, client):
        """Test unknown routes answer with the error body."""
        response = client.get("/api/v1/unknown")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}

    def test_trailing_slash_not_redirected(self, client):
        """Test trailing slashes are not redirected."""
        response = client.get("/api/v1/fees/", follow_redirects=False)

        assert response.status_code == 404


class TestLifespan:
    """Tests for application startup and shutdown."""

    @patch("src.api.app.close_db", new_callable=AsyncMock)
    @patch("src.api.app.check_database_connection", new_callable=AsyncMock)
    @patch("src.api.app.init_db", new_callable=AsyncMock)
    def test_database_checked_on_startup(self, mock_init, mock_check, mock_close, app):
        """Test startup opens the pool and checks the database."""
        mock_check.return_value = True

        with TestClient(app):
            mock_init.assert_awaited_once()
            mock_check.assert_awaited_once()

        mock_close.assert_awaited_once()

    @patch("src.api.app.close_db", new_callable=AsyncMock)
    @patch("src.api.app.check_database_connection", new_callable=AsyncMock)
    @patch("src.api.app.init_db", new_callable=AsyncMock)
    def test_unreachable_database_still_serves(self, mock_init, mock_check, mock_close, app):
        """Test an unreachable database does not stop the app from starting."""
        mock_check.return_value = False

        with TestClient(app) as client:
            response = client.get("/api/v1/unknown")

        assert response.status_code == 404
        mock_check.assert_awaited_once()
