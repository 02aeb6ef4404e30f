import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

import clm.repositories.contract as contract_repo
from clm.api.deps import get_database
from clm.core.config import settings
from clm.db.base import Database
from clm.main import app, create_app


# ============================================================================
# HEALTH TESTS
# ============================================================================


def test_health(client):
    """Test health reports a connected database."""
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["version"] == settings.app_version
    assert "timestamp" in body
    assert "error" not in body


def test_health_database_unreachable(client):
    """Test health still answers when the database cannot be reached."""
    missing_dir = os.path.join(tempfile.mkdtemp(), "missing")
    broken = Database(f"sqlite:///{missing_dir}/clm.db")
    app.dependency_overrides[get_database] = lambda: broken
    try:
        response = client.get("/health")
    finally:
        broken.dispose()

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["database"] == "disconnected"
    assert body["error"]


def test_lifespan_opens_database():
    """Test the application lifespan attaches a Database to app state."""
    application = create_app()
    with TestClient(application) as test_client:
        assert isinstance(application.state.database, Database)
        assert test_client.get("/health").json()["database"] == "connected"


# ============================================================================
# ROUTE INDEX TESTS
# ============================================================================


def test_api_docs(client):
    """Test the documentation index lists the contract routes."""
    response = client.get("/api-docs")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "CLM Automation API Documentation"
    assert body["version"] == settings.app_version
    endpoints = body["endpoints"]
    for route in (
        "GET /health",
        "GET /api/contracts",
        "POST /api/contracts",
        "GET /api/contracts/{contract_id}",
        "PUT /api/contracts/{contract_id}",
        "DELETE /api/contracts/{contract_id}",
        "GET /api/contracts/export/csv",
    ):
        assert route in endpoints
    assert endpoints["GET /api/contracts/stats"] == "Dashboard statistics."


def test_unknown_route(client):
    """Test unknown paths return 404 with the list of available routes."""
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Route not found"
    assert body["code"] == "ROUTE_NOT_FOUND"
    assert "GET /api/contracts" in body["availableRoutes"]


def test_unsupported_method_is_route_not_found(client):
    """Test an unsupported method on a known path is reported like an unknown route."""
    response = client.patch("/api/contracts")
    assert response.status_code == 404
    assert response.json()["code"] == "ROUTE_NOT_FOUND"


# ============================================================================
# ERROR HANDLING TESTS
# ============================================================================


def _failing_stats(*args, **kwargs):
    raise RuntimeError("stats query exploded")


def test_unhandled_error_returns_500_with_details(client, monkeypatch):
    """Test unexpected errors map to 500 and include details outside production."""
    monkeypatch.setattr(contract_repo, "get_dashboard_stats", _failing_stats)
    test_client = TestClient(app, raise_server_exceptions=False)

    response = test_client.get("/api/contracts/stats")
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal server error"
    assert body["code"] == "INTERNAL_ERROR"
    assert body["details"] == "stats query exploded"


def test_unhandled_error_hides_details_in_production(client, monkeypatch):
    """Test production responses do not leak error details."""
    monkeypatch.setattr(contract_repo, "get_dashboard_stats", _failing_stats)
    monkeypatch.setattr(settings, "environment", "production")
    test_client = TestClient(app, raise_server_exceptions=False)

    response = test_client.get("/api/contracts/stats")
    assert response.status_code == 500
    assert "details" not in response.json()


# ============================================================================
# DATABASE TESTS
# ============================================================================


def test_failed_statement_does_not_leak_query_timer():
    """Test the per-connection timing stack is emptied when a statement fails."""
    database = Database("sqlite://")
    try:
        with database.engine.connect() as connection:
            with pytest.raises(OperationalError):
                connection.execute(text("SELECT * FROM missing_table"))
            assert connection.info.get("query_start_time") == []

            connection.execute(text("SELECT 1"))
            assert connection.info.get("query_start_time") == []
    finally:
        database.dispose()
