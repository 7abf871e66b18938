import uuid

import pytest

from api import create_app
from models import storage
from models.user import Role


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_service(app):
    return app.extensions["auth_service"]


@pytest.fixture
def secret(app):
    return app.config["JWT_SECRET"]


@pytest.fixture
def login_as(client):
    """Register a fresh user with the given role over HTTP and return its access token."""

    def _login_as(role=Role.USER, password="pw123"):
        role = Role(role).value
        username = f"{role}_{uuid.uuid4().hex[:12]}"
        resp = client.post(
            "/api/v1/auth/register",
            json={"username": username, "password": password, "role": role},
        )
        assert resp.status_code == 201
        resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200
        return resp.get_json()["access_token"]

    return _login_as
