"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings backed by a throwaway SQLite database."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'safenest_test.db'}",
        SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings):
    """Test client with the application lifespan running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def register_guardian(client, email="guardian@example.com", name="Pat"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": "s3cret-pass", "name": name},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def add_member(client, headers, name="Alice", relationship="daughter"):
    response = client.post(
        "/api/family",
        json={"name": name, "relationship": relationship},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["member"]["id"]


@pytest.fixture
def auth_headers(client):
    """Bearer headers for a freshly registered guardian."""
    return register_guardian(client)


@pytest.fixture
def member_id(client, auth_headers):
    """An active family member owned by the default guardian."""
    return add_member(client, auth_headers)
