"""API tests for registration, login and the auth middleware."""

from datetime import timedelta

import pytest

from listindia.application.services.auth_service import create_user
from listindia.core.exceptions import ConflictException
from listindia.domain.models.user import UserRole
from listindia.interfaces.deps import get_user_repository
from listindia.main import app

PASSWORD = "secret123"


def _register(client, **overrides):
    payload = {
        "first_name": "Priya",
        "last_name": "Sharma",
        "email": "priya@example.com",
        "password": "secret123",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


class TestRegister:

    def test_creates_customer_and_returns_token(self, client, tokens):
        response = _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "priya@example.com"
        assert body["user"]["role"] == "customer"
        assert body["user"]["is_verified"] is False
        assert "password_hash" not in body["user"]
        assert tokens.verify(body["access_token"]).user_id == body["user"]["id"]

    def test_business_owner_registration(self, client):
        response = _register(client, role="business")
        assert response.json()["user"]["role"] == "business"

    def test_email_is_normalized(self, client):
        response = _register(client, email="Priya@Example.COM")
        assert response.json()["user"]["email"] == "priya@example.com"

    def test_duplicate_email(self, client):
        _register(client)
        response = _register(client, email="PRIYA@example.com")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "Conflict"

    def test_email_taken_after_precheck_is_conflict(self, client, make_user, user_repo, monkeypatch):
        make_user(email="priya@example.com")
        # Another registration commits between the lookup and the insert
        monkeypatch.setattr(user_repo, "get_by_email", lambda email: None)
        app.dependency_overrides[get_user_repository] = lambda: user_repo

        response = _register(client)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "Conflict"

    def test_unique_email_is_enforced_by_the_store(self, make_user, user_repo):
        make_user(email="priya@example.com")

        with pytest.raises(ConflictException):
            create_user(user_repo, "Priya", "Sharma", "PRIYA@example.com", PASSWORD)

        assert user_repo.count() == 1

    def test_cannot_self_register_as_admin(self, client):
        assert _register(client, role="admin").status_code == 422

    def test_validation(self, client):
        assert _register(client, password="123").status_code == 422
        assert _register(client, first_name="A").status_code == 422
        assert _register(client, email="not-an-email").status_code == 422


class TestLogin:

    def test_valid_credentials(self, client, make_user, tokens):
        user = make_user(email="ravi@example.com")

        response = client.post("/api/auth/login", json={"email": "ravi@example.com", "password": PASSWORD})

        assert response.status_code == 200
        assert tokens.verify(response.json()["access_token"]).user_id == user.id

    def test_wrong_password(self, client, make_user):
        make_user(email="ravi@example.com")

        response = client.post("/api/auth/login", json={"email": "ravi@example.com", "password": "wrong-one"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "InvalidCredentials"

    def test_unknown_email_gives_same_error(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "InvalidCredentials"


class TestMe:

    def test_returns_current_user(self, client, make_user, auth_headers):
        user = make_user(role=UserRole.BUSINESS)

        response = client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["id"] == user.id
        assert response.json()["role"] == "business"

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TokenMissing"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "InvalidToken"

    def test_expired_token(self, client, make_user, auth_headers):
        user = make_user()

        response = client.get("/api/auth/me", headers=auth_headers(user, expires_delta=timedelta(seconds=-5)))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TokenExpired"

    def test_deleted_user(self, client, make_user, auth_headers, user_repo):
        user = make_user()
        headers = auth_headers(user)
        user_repo.delete(user.id)

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SubjectNotFound"
