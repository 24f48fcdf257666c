"""
Tests for login, tokens and the current-user dependency.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from api import auth
from api.auth import TokenManager, UserDirectory, hash_password, verify_password
from api.main import app, get_book_store
from library.store import BookStore


@pytest.fixture
def client():
    app.dependency_overrides[get_book_store] = lambda: BookStore()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def users():
    return UserDirectory.with_demo_users(rounds=4)


class TestPasswords:
    """Test cases for password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret", rounds=4)
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash(self):
        assert not verify_password("s3cret", "not-a-hash")


class TestUserDirectory:
    """Test cases for the demo users."""

    def test_demo_users(self, users):
        assert {u.username for u in users.list_users()} == {"testuser", "demo", "admin"}
        assert users.get("demo123").display_name == "Demo User"

    @pytest.mark.parametrize("username, password, user_id", [
        ("testuser", "testpass", "user123"),
        ("demo", "demo123", "demo123"),
        ("admin", "admin123", "admin123"),
    ])
    def test_authenticate(self, users, username, password, user_id):
        assert users.authenticate(username, password).id == user_id

    def test_authenticate_failures(self, users):
        assert users.authenticate("demo", "wrong") is None
        assert users.authenticate("nobody", "demo123") is None


class TestTokens:
    """Test cases for token issue and verification."""

    def test_round_trip_claims(self, users):
        tokens = TokenManager(secret_key="k" * 32)
        claims = tokens.decode_token(tokens.create_token(users.get("user123")))

        assert claims["sub"] == "user123"
        assert claims["name"] == "testuser"
        assert claims["displayName"] == "Test User"
        assert claims["iss"] == "BookTracker"
        assert claims["aud"] == "BookTrackerUsers"

    def test_expired_token(self, users):
        tokens = TokenManager(secret_key="k" * 32, expire_minutes=1)
        token = tokens.create_token(users.get("user123"), now=datetime.now(timezone.utc) - timedelta(hours=1))
        with pytest.raises(jwt.ExpiredSignatureError):
            tokens.decode_token(token)

    def test_wrong_audience(self, users):
        issuer = TokenManager(secret_key="k" * 32, audience="Someone Else")
        verifier = TokenManager(secret_key="k" * 32)
        with pytest.raises(jwt.InvalidTokenError):
            verifier.decode_token(issuer.create_token(users.get("user123")))


class TestEndpoints:
    """Test cases for the auth endpoints."""

    def test_login_and_me(self, client):
        response = client.post("/api/auth/login", json={"username": "demo", "password": "demo123"})
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == "demo123"
        assert data["user"]["displayName"] == "Demo User"

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["username"] == "demo"

    def test_login_bad_password(self, client):
        response = client.post("/api/auth/login", json={"username": "demo", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid username or password"

    def test_token_without_subject_uses_fallback(self, client):
        token = jwt.encode(
            {"iss": "BookTracker", "aud": "BookTrackerUsers"},
            auth.config.secret_key,
            algorithm="HS256",
        )
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["id"] == "demo123"

    def test_anonymous_access_when_allowed(self, client, monkeypatch):
        monkeypatch.setattr(auth.config, "allow_anonymous", True)
        response = client.get("/api/books")
        assert response.status_code == 200
        assert response.json()["totalCount"] == 0

    def test_expired_token_rejected(self, client):
        user = client.app.state.users.get("user123")
        token = TokenManager().create_token(user, now=datetime.now(timezone.utc) - timedelta(days=30))
        response = client.get("/api/books", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"
