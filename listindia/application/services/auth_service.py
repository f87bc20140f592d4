"""Auth service — password hashing, registration and login."""

from typing import Optional

import structlog
from passlib.context import CryptContext

from listindia.config import get_settings
from listindia.core.exceptions import ConflictException, InvalidCredentialsException
from listindia.domain.models.user import User, UserRole
from listindia.domain.repositories.user_repository import UserRepository
from listindia.domain.schemas.auth import TokenIdentity, TokenResponse, UserCreate, UserRead, UserUpdate
from listindia.application.services.token_service import TokenService

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def issue_token_response(user: User, tokens: TokenService) -> TokenResponse:
    access_token = tokens.issue(TokenIdentity(user_id=user.id, email=user.email, role=user.role))
    return TokenResponse(access_token=access_token, user=UserRead.model_validate(user))


def create_user(
    repo: UserRepository,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.CUSTOMER,
    is_verified: bool = False,
) -> User:
    return repo.create(
        {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password_hash": hash_password(password),
            "role": role,
            "is_verified": is_verified,
        }
    )


def register_user(repo: UserRepository, tokens: TokenService, body: UserCreate) -> TokenResponse:
    if repo.get_by_email(body.email):
        raise ConflictException("An account with this email already exists")

    user = create_user(
        repo,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    logger.info("User registered", user_id=user.id, role=user.role.value)
    return issue_token_response(user, tokens)


def authenticate_user(repo: UserRepository, email: str, password: str) -> Optional[User]:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def login(repo: UserRepository, tokens: TokenService, email: str, password: str) -> TokenResponse:
    user = authenticate_user(repo, email, password)
    if user is None:
        logger.info("Login failed", email=email.strip().lower())
        raise InvalidCredentialsException()
    return issue_token_response(user, tokens)


def update_profile(repo: UserRepository, user: User, body: UserUpdate) -> User:
    return repo.update(user, body)


def ensure_admin(repo: UserRepository, email: str, password: str) -> User:
    """Create the bootstrap admin account if it does not exist yet."""
    admin = repo.get_by_email(email)
    if admin:
        return admin
    admin = create_user(
        repo,
        first_name="Admin",
        last_name="User",
        email=email,
        password=password,
        role=UserRole.ADMIN,
        is_verified=True,
    )
    logger.info("Default admin user created", email=admin.email)
    return admin
