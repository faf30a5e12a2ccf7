from __future__ import annotations

import pytest

from api import create_app
from models.db_storage import DBStorage
from models.user import User
from services.tokens import TokenIssuer
from utils.security import hash_password

PASSWORD = "correct-horse-battery"


@pytest.fixture()
def app():
    app = create_app("testing")
    yield app
    app.extensions["storage"].dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def app_storage(app):
    return app.extensions["storage"]


@pytest.fixture()
def register(client):
    """Register through the API; returns the JSON body ({user, accessToken, refreshToken})."""

    def _register(username="alice", email="alice@x.com", password=PASSWORD):
        resp = client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _register


@pytest.fixture()
def alice(register):
    return register()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def alice_headers(alice):
    return bearer(alice["accessToken"])


# Service-level fixtures: a bare storage and token issuer, no Flask app.

@pytest.fixture()
def storage():
    storage = DBStorage("sqlite://")
    storage.reload()
    yield storage
    storage.dispose()


@pytest.fixture()
def issuer():
    return TokenIssuer(access_secret="access-secret", refresh_secret="refresh-secret", issuer="tests")


@pytest.fixture()
def make_user(storage):
    def _make_user(username="bob", email="bob@x.com", password=PASSWORD, is_active=True):
        user = User(username=username, email=email, password_hash=hash_password(password), is_active=is_active)
        storage.new(user)
        storage.save()
        return user

    return _make_user


@pytest.fixture()
def auth_headers():
    return bearer
