"""Shared fixtures: in-memory SQLite database, API client and data builders."""

import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from listindia.application.services.auth_service import create_user
from listindia.application.services.token_service import get_token_service
from listindia.domain.models.business import Business, BusinessCategory
from listindia.domain.models.review import Review
from listindia.domain.models.user import User, UserRole
from listindia.domain.schemas.auth import TokenIdentity
from listindia.infrastructure.database import Base, SessionLocal, engine
from listindia.infrastructure.repositories.business_repository import SQLAlchemyBusinessRepository
from listindia.infrastructure.repositories.review_repository import SQLAlchemyReviewRepository
from listindia.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from listindia.main import app

PASSWORD = "secret123"


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def tokens():
    return get_token_service()


@pytest.fixture
def user_repo(db_session):
    return SQLAlchemyUserRepository(db_session, User)


@pytest.fixture
def business_repo(db_session):
    return SQLAlchemyBusinessRepository(db_session, Business)


@pytest.fixture
def review_repo(db_session):
    return SQLAlchemyReviewRepository(db_session, Review)


@pytest.fixture
def make_user(user_repo):
    counter = {"n": 0}

    def _make(role=UserRole.CUSTOMER, email=None, is_verified=False, first_name="Asha"):
        counter["n"] += 1
        return create_user(
            user_repo,
            first_name=first_name,
            last_name="Rao",
            email=email or f"user{counter['n']}@example.com",
            password=PASSWORD,
            role=role,
            is_verified=is_verified,
        )

    return _make


@pytest.fixture
def make_business(business_repo):
    counter = {"n": 0}

    def _make(owner=None, **overrides):
        counter["n"] += 1
        data = {
            "name": f"Chai Point {counter['n']}",
            "description": "Fresh tea and snacks all day long.",
            "category": BusinessCategory.RESTAURANT,
            "address": f"{counter['n']} MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "zip_code": "560001",
            "phone": "+91 80 1234 5678",
            "email": "hello@chaipoint.example",
            "is_approved": True,
            "owner_id": owner.id if owner else None,
        }
        data.update(overrides)
        return business_repo.create(data)

    return _make


@pytest.fixture
def token_for(tokens):
    def _token(user, **kwargs):
        return tokens.issue(TokenIdentity(user_id=user.id, email=user.email, role=user.role), **kwargs)

    return _token


@pytest.fixture
def auth_headers(token_for):
    def _headers(user, **kwargs):
        return {"Authorization": f"Bearer {token_for(user, **kwargs)}"}

    return _headers
