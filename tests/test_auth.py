from datetime import datetime, timedelta, timezone

import jwt
import pytest

from bloglist.auth import (
    TokenClaims,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from bloglist.errors import Unauthorized


def test_hash_and_verify_password():
    hashed = hash_password("secret", rounds=4)
    assert hashed != "secret"
    assert hashed.startswith("$2b$04$")
    assert verify_password("secret", hashed)
    assert not verify_password("Secret", hashed)


def test_hash_is_salted():
    assert hash_password("secret", rounds=4) != hash_password("secret", rounds=4)


def test_verify_password_rejects_non_bcrypt_value():
    assert not verify_password("secret", "not-a-hash")


def test_token_roundtrip(settings):
    token = create_access_token("a" * 24, "johndoe", settings)
    claims = decode_access_token(token, settings)
    assert claims == TokenClaims(user_id="a" * 24, username="johndoe")


def test_token_with_wrong_signature(settings):
    token = create_access_token("a" * 24, "johndoe", settings)
    other = settings.model_copy(update={"jwt_secret": "another-secret"})
    with pytest.raises(Unauthorized):
        decode_access_token(token, other)


def test_expired_token(settings):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {"sub": "a" * 24, "username": "johndoe", "iat": past, "exp": past + timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(Unauthorized) as excinfo:
        decode_access_token(token, settings)
    assert excinfo.value.message == "token expired"


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token(settings, token):
    with pytest.raises(Unauthorized):
        decode_access_token(token, settings)


def test_token_without_identity_claims(settings):
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(Unauthorized):
        decode_access_token(token, settings)


def test_register_and_login(client):
    resp = client.post(
        "/api/users",
        json={"username": "mluukkai", "name": "Matti Luukkainen", "password": "salainen"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["username"] == "mluukkai"
    assert data["name"] == "Matti Luukkainen"
    assert "password" not in data and "password_hash" not in data
    assert resp.headers["Location"] == f"/api/users/{data['id']}"

    resp = client.post("/api/login", json={"username": "mluukkai", "password": "salainen"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "mluukkai"
    assert body["name"] == "Matti Luukkainen"
    assert body["token"]


def test_login_failures_are_indistinguishable(client, register):
    user = register(password="secret123")
    wrong_password = client.post(
        "/api/login", json={"username": user["username"], "password": "wrong"}
    )
    unknown_user = client.post(
        "/api/login", json={"username": "nonexistent", "password": "wrongpassword"}
    )
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_login_with_missing_fields(client):
    resp = client.post("/api/login", json={})
    assert resp.status_code == 401


def test_duplicate_username_is_rejected(client, register):
    user = register()
    resp = client.post(
        "/api/users",
        json={"username": user["username"], "name": "Other", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert "unique" in resp.json()["error"]


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "No Username", "password": "secret123"},
        {"username": "nopassword", "name": "No Password"},
        {"username": "ab", "name": "Short", "password": "secret123"},
        {"username": "shortpass", "name": "Short", "password": "pw"},
        {"username": "longpass", "name": "Long", "password": "x" * 100},
        {"username": "longutf8", "name": "Long", "password": "\u00e9" * 40},
    ],
)
def test_registration_validation(client, payload):
    resp = client.post("/api/users", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_login_with_overlong_password(client, register):
    user = register(password="secret123")
    resp = client.post(
        "/api/login", json={"username": user["username"], "password": "x" * 100}
    )
    assert resp.status_code == 401
