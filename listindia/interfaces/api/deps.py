"""FastAPI dependencies — JWT authentication and authorization gate."""

from typing import Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from listindia.application.services.authorization import (
    Requirement,
    RequireRole,
    RequireVerified,
    authorize,
    resolve_identity,
    resolve_optional_identity,
)
from listindia.application.services.token_service import TokenService
from listindia.domain.models.user import UserRole
from listindia.domain.repositories.user_repository import UserRepository
from listindia.domain.schemas.auth import AuthContext
from listindia.interfaces.deps import get_tokens, get_user_repository

security = HTTPBearer(auto_error=False)


def _attach(request: Request, identity: Optional[AuthContext]) -> Optional[AuthContext]:
    request.state.identity = identity
    if identity is not None:
        structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_tokens),
    users: UserRepository = Depends(get_user_repository),
) -> AuthContext:
    """Require a valid bearer token for an existing user."""
    token = credentials.credentials if credentials else None
    return _attach(request, resolve_identity(token, tokens, users))


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_tokens),
    users: UserRepository = Depends(get_user_repository),
) -> Optional[AuthContext]:
    """Resolve the caller when possible; anonymous otherwise."""
    token = credentials.credentials if credentials else None
    return _attach(request, resolve_optional_identity(token, tokens, users))


def require(*requirements: Requirement):
    """Build a dependency that authenticates and then runs the given checks."""

    def dependency(identity: AuthContext = Depends(get_current_user)) -> AuthContext:
        return authorize(identity, *requirements)

    return dependency


def require_role(*roles: UserRole):
    return require(RequireRole(*roles))


require_admin = require_role(UserRole.ADMIN)
require_business_owner = require_role(UserRole.BUSINESS, UserRole.ADMIN)
require_verified = require(RequireVerified())
