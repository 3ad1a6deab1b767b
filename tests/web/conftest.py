"""Fixtures for Web API tests."""

import pytest
from fastapi.testclient import TestClient

from scoremanager.web.api import create_app
from scoremanager.web.dependencies import SESSION_HEADER
from scoremanager.web.sessions import reset_session_manager


@pytest.fixture(autouse=True)
def _fresh_sessions():
    """Each test gets its own session registry."""
    reset_session_manager()
    yield
    reset_session_manager()


@pytest.fixture
def client(app_config, store):
    """Test client over a temp store."""
    return TestClient(create_app(config=app_config, store=store))


@pytest.fixture
def auth_headers(client):
    """Sign in as the allowed identity and return the session header."""
    response = client.post("/api/auth/login", json={"email": "admin@example.com"})
    assert response.status_code == 200
    return {SESSION_HEADER: response.json()["session_id"]}
