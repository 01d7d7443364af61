import uuid

import pytest
from fastapi.testclient import TestClient

from bloglist.api import create_app
from bloglist.config import Settings


@pytest.fixture
def settings():
    """In-memory database and a cheap hash work factor for tests."""
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session(app):
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def register(client):
    """Register a user through the API and return its JSON body."""

    def _register(username=None, password="secret123", name="Test User"):
        username = username or f"user_{uuid.uuid4().hex[:12]}"
        resp = client.post(
            "/api/users",
            json={"username": username, "name": name, "password": password},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


@pytest.fixture
def login(client, register):
    """Register a fresh user, log in and return (user, auth headers)."""

    def _login(password="secret123"):
        user = register(password=password)
        resp = client.post(
            "/api/login", json={"username": user["username"], "password": password}
        )
        assert resp.status_code == 200, resp.text
        return user, {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login
