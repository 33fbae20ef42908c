"""
Tests for cookie/JWT login.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import pytest

from api.auth import TOKEN_COOKIE, check_password, create_token, decode_token
from api.shared.errors import AuthenticationError

from .conftest import JWT_SECRET, USER_LOGIN, USER_PASSWORD


def test_token_round_trip():
    assert decode_token(create_token("alpha", JWT_SECRET), JWT_SECRET) == "alpha"


def test_expired_token():
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token = create_token("alpha", JWT_SECRET, now=issued)
    with pytest.raises(AuthenticationError, match="expired"):
        decode_token(token, JWT_SECRET)


def test_wrong_secret():
    token = create_token("alpha", JWT_SECRET)
    with pytest.raises(AuthenticationError):
        decode_token(token, "another-secret-with-enough-bytes-too")


def test_check_password_never_raises():
    password_hash = bcrypt.hashpw(USER_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
    assert check_password(USER_PASSWORD, password_hash)
    assert not check_password("x" * 100, password_hash)
    assert not check_password(USER_PASSWORD, "not-a-bcrypt-hash")


class TestLoginFlow:
    def test_profile_requires_cookie(self, auth_client):
        assert auth_client.get("/api/profile").status_code == 401

    def test_bad_password(self, auth_client):
        response = auth_client.post("/api/login", json={"login": USER_LOGIN, "password": "wrong"})
        assert response.status_code == 401
        assert TOKEN_COOKIE not in response.cookies

    def test_bad_login(self, auth_client):
        response = auth_client.post("/api/login", json={"login": "beta", "password": USER_PASSWORD})
        assert response.status_code == 401

    def test_login_profile_logout(self, auth_client):
        response = auth_client.post("/api/login", json={"login": USER_LOGIN, "password": USER_PASSWORD})
        assert response.status_code == 200
        assert TOKEN_COOKIE in response.cookies

        profile = auth_client.get("/api/profile")
        assert profile.status_code == 200
        assert profile.json() == {"login": USER_LOGIN, "authEnabled": True}

        auth_client.post("/api/logout")
        auth_client.cookies.clear()
        assert auth_client.get("/api/profile").status_code == 401


def test_login_disabled(client):
    assert client.post("/api/login", json={"login": "a", "password": "b"}).status_code == 401
    assert client.get("/api/profile").json() == {"login": None, "authEnabled": False}
