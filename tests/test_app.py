"""
Application-level behavior: the 500 handler, request logging and the
documented response models.
"""

import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.main import app

LOGIN = "/api/v1/auth/login"
CREDENTIALS = {"email": "ada@example.com", "password": "correct-horse-1"}


@pytest.fixture
def broken_db(client):
    """Make every database-backed route fail with a driver error."""
    async def _broken():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))
        yield

    app.dependency_overrides[get_db] = _broken
    return TestClient(app, raise_server_exceptions=False)


def test_unhandled_error_hides_detail(broken_db):
    response = broken_db.post(LOGIN, json=CREDENTIALS, headers={"X-Request-ID": "req-123"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal Server Error",
        "message": "An internal error occurred",
        "requestId": "req-123",
    }
    assert response.headers["X-Request-ID"] == "req-123"
    assert "database is locked" not in response.text


def test_unhandled_error_detail_in_debug(broken_db, settings, monkeypatch):
    monkeypatch.setattr("app.main.settings", settings.model_copy(update={"debug": True}))

    response = broken_db.post(LOGIN, json=CREDENTIALS)

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert "OperationalError" in body["detail"]
    assert body["requestId"] == response.headers["X-Request-ID"]


def test_unhandled_error_is_logged(broken_db, caplog):
    caplog.set_level(logging.INFO, logger="app.main")

    broken_db.post(LOGIN, json=CREDENTIALS, headers={"X-Request-ID": "req-456"})

    messages = [r.getMessage() for r in caplog.records if r.name == "app.main"]
    assert any("[req-456] POST /api/v1/auth/login -> unhandled exception" in m for m in messages)
    assert any("[req-456] Unhandled exception" in m for m in messages)


def test_request_log_carries_user_id(client, create_user, bearer, caplog):
    user_id = create_user()
    caplog.set_level(logging.INFO, logger="app.main")

    assert client.get("/api/v1/portal/profile", headers=bearer(user_id)).status_code == 200
    client.get("/api/v1/portal/profile")

    lines = [
        r.getMessage() for r in caplog.records
        if r.name == "app.main" and "/api/v1/portal/profile" in r.getMessage()
    ]
    assert f"user={user_id})" in lines[0]
    assert "-> 401" in lines[1]
    assert "user=None)" in lines[1]


def test_health_response(client):
    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["environment"] == "test"
    assert body["version"] == app.version
    assert body["timestamp"]


def test_error_model_is_documented(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    login = schema["paths"][LOGIN]["post"]["responses"]
    assert login["401"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert "429" in schema["paths"]["/api/v1/chat"]["post"]["responses"]
