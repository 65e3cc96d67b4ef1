"""Tests for the application shell: metadata, fallbacks, middleware, lifespan."""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from users_api.config import Settings
from users_api.core.dependencies import get_user_service
from users_api.main import app, create_app


@pytest.fixture
def broken_client():
    """Client whose user service fails with an infrastructure error."""
    service = MagicMock()
    service.get_all.side_effect = OperationalError("SELECT * FROM users", {}, Exception("connection refused"))
    service.get_by_id.side_effect = RuntimeError("secret internal detail")
    app.dependency_overrides[get_user_service] = lambda: service

    client = TestClient(app, raise_server_exceptions=False)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


def test_root_endpoint():
    """Test that / describes the service."""
    response = TestClient(app).get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Users API"
    assert data["version"] == "1.0.0"
    assert data["message"] == "Users API is running"
    assert "timestamp" in data


def test_unknown_route_returns_envelope():
    """Test that unmatched routes return the 404 envelope."""
    response = TestClient(app).get("/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


def test_method_not_allowed_returns_envelope():
    """Test that other framework HTTP errors keep the envelope."""
    response = TestClient(app).post("/health")

    assert response.status_code == 405
    assert response.json()["success"] is False


def test_infrastructure_error_returns_500(broken_client: TestClient):
    """Test that database failures surface as a generic 500."""
    response = broken_client.get("/users")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_unexpected_error_is_not_leaked(broken_client: TestClient, caplog):
    """Test that the 500 body hides the exception while the log keeps it."""
    caplog.set_level(logging.ERROR)

    response = broken_client.get("/users/some-id")

    assert response.status_code == 500
    assert "secret internal detail" not in response.text
    assert any("secret internal detail" in record.getMessage() for record in caplog.records)


def test_cors_allows_any_origin_by_default():
    """Test the permissive default CORS configuration."""
    client = TestClient(app)

    simple = client.get("/health", headers={"Origin": "http://example.com"})
    preflight = client.options(
        "/users",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "DELETE",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert simple.headers["access-control-allow-origin"] == "*"
    assert preflight.status_code == 200
    assert "DELETE" in preflight.headers["access-control-allow-methods"]


def test_pretty_query_parameter_indents_json():
    """Test that ?pretty returns indented JSON with the same content."""
    client = TestClient(app)

    compact = client.get("/health")
    pretty = client.get("/health", params={"pretty": ""})

    assert "\n" not in compact.text
    assert pretty.status_code == 200
    assert pretty.headers["content-type"] == "application/json"
    assert '\n  "status": "healthy"' in pretty.text
    assert pretty.json()["status"] == "healthy"


def test_request_logging(caplog):
    """Test that each request is logged with method, path, status and duration."""
    caplog.set_level(logging.INFO, logger="users_api.access")

    TestClient(app).get("/health")

    records = [record for record in caplog.records if record.name == "users_api.access"]
    assert records
    record = records[-1]
    assert record.method == "GET"
    assert record.path == "/health"
    assert record.status_code == 200
    assert record.duration_ms >= 0


def test_lifespan_wires_database():
    """Test that startup builds the engine and serves requests without overrides."""
    lifespan_app = create_app(Settings(_env_file=None, auto_create_tables=True))

    with TestClient(lifespan_app) as client:
        assert lifespan_app.state.session_factory is not None

        created = client.post("/users", json={"email": "life@example.com", "name": "Life"})
        listed = client.get("/users")
        ready = client.get("/health/ready")

    assert created.status_code == 201
    assert [user["email"] for user in listed.json()["data"]] == ["life@example.com"]
    assert ready.status_code == 200


def test_root_reports_app_factory_settings():
    """Test that / describes the settings the app was built with."""
    custom_app = create_app(Settings(_env_file=None, app_name="Accounts", app_version="2.3.4"))

    data = TestClient(custom_app).get("/").json()

    assert data["name"] == "Accounts"
    assert data["version"] == "2.3.4"
    assert data["message"] == "Accounts is running"


def test_internal_error_keeps_cors_headers(broken_client: TestClient):
    """Test that cross-origin clients can read the 500 envelope."""
    response = broken_client.get("/users", headers={"Origin": "http://example.com"})

    assert response.status_code == 500
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == {"success": False, "error": "Internal server error"}
