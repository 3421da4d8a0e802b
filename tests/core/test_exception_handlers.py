"""Tests for dbprobe/core/exception_handlers.py - Global error responses."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from dbprobe.core.exception_handlers import unhandled_exception_handler
from dbprobe.core.exceptions import AppException, ConnectionAcquisitionError
from dbprobe.main import app
from tests.fakes import FakePool


def test_unknown_route_returns_json_error(client: TestClient):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"type": "http_error", "message": "Not Found"}


def test_unhandled_exception_hides_details():
    request = MagicMock()
    request.method = "GET"
    request.url.path = "/api/health/db"

    response = unhandled_exception_handler(request, RuntimeError("secret dsn"))

    assert response.status_code == 500
    assert b"secret dsn" not in response.body


def test_app_exceptions_are_answered_by_the_health_check(
    client: TestClient, fake_pool: FakePool
):
    """No global AppException handler; the check turns them into plain text."""
    fake_pool.acquire_error = ConnectionAcquisitionError("pool exhausted")

    response = client.get("/api/health/db")

    assert AppException not in app.exception_handlers
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "db-error: pool exhausted"


def test_database_errors_are_app_exceptions():
    error = ConnectionAcquisitionError("connection refused")

    assert isinstance(error, AppException)
    assert error.status_code == 500
    assert error.message == "connection refused"
