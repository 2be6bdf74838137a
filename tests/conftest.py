"""Shared test fixtures for the Trip Planner API."""

import os

# Settings are read at import time, so configure them before the
# application package is imported by any test module.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from fastapi.testclient import TestClient

from trip_planner_api.app.core.config import Settings
from trip_planner_api.app.core.db import connect, init_db
from trip_planner_api.app.core.security import hash_password
from trip_planner_api.app.main import create_app
from trip_planner_api.app.services.rate_service import RateAggregator

PASSWORD = "secret1"


def offline_transport() -> httpx.MockTransport:
    """Transport whose every request fails like an unreachable host."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("provider unreachable", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def conn():
    """Migrated in-memory database."""
    connection = connect(":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def make_user(conn):
    def _make(email: str) -> int:
        cursor = conn.execute(
            "INSERT INTO users (email, password) VALUES (?, ?)", (email, hash_password(PASSWORD))
        )
        conn.commit()
        return cursor.lastrowid

    return _make


@pytest.fixture
def test_settings():
    return Settings(
        database_url=":memory:",
        rate_limit_max_requests=1000,
        auth_rate_limit_max_requests=1000,
    )


@pytest.fixture
def client(test_settings):
    """Test client with a fresh in-memory database and offline rate providers."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        http_client = httpx.AsyncClient(transport=offline_transport())
        app.state.rates = RateAggregator(
            http_client, test_settings.fallback_rates, timeout=1, max_days=test_settings.timeseries_max_days
        )
        yield test_client
        test_client.portal.call(http_client.aclose)


@pytest.fixture
def auth_headers(client):
    """Register and log in a user, returning its Authorization header."""

    def _login(email: str = "alice@example.com") -> dict:
        client.post("/api/register", json={"email": email, "password": PASSWORD})
        response = client.post("/api/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
