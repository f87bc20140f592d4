"""Request authentication and authorization checks.

A request moves through: token presented -> token validated -> subject
resolved -> authorized. Each step that fails raises its own exception kind
so clients can tell "log in again" apart from "wrong role".
"""

from typing import Optional

from listindia.application.services.token_service import TokenService
from listindia.core.exceptions import (
    NotVerifiedException,
    RoleForbiddenException,
    SubjectNotFoundException,
    TokenMissingException,
    UnauthorizedException,
)
from listindia.domain.models.user import UserRole
from listindia.domain.repositories.user_repository import UserRepository
from listindia.domain.schemas.auth import AuthContext

ROLE_MESSAGES = {
    UserRole.CUSTOMER: "Customer access required",
    UserRole.BUSINESS: "Business owner access required",
    UserRole.ADMIN: "Admin access required",
}


class Requirement:
    """A single authorization check run against a resolved identity."""

    def check(self, identity: AuthContext) -> None:
        raise NotImplementedError


class RequireRole(Requirement):
    def __init__(self, *roles: UserRole):
        if not roles:
            raise ValueError("RequireRole needs at least one role")
        self.roles = frozenset(roles)

    def check(self, identity: AuthContext) -> None:
        if identity.role in self.roles:
            return
        if len(self.roles) == 1:
            (role,) = self.roles
            message = ROLE_MESSAGES[role]
        else:
            message = "Requires one of: " + ", ".join(sorted(r.value for r in self.roles))
        raise RoleForbiddenException(message, details={"role": identity.role.value})


class RequireVerified(Requirement):
    def check(self, identity: AuthContext) -> None:
        if not identity.is_verified:
            raise NotVerifiedException()


def authorize(identity: AuthContext, *requirements: Requirement) -> AuthContext:
    for requirement in requirements:
        requirement.check(identity)
    return identity


def resolve_identity(
    token: Optional[str],
    tokens: TokenService,
    users: UserRepository,
) -> AuthContext:
    """Verify the token and load the subject's current role and verified flag."""
    if not token:
        raise TokenMissingException()

    claims = tokens.verify(token)

    # Authorization uses the stored user, never the claims baked into the token
    user = users.get_by_id(claims.user_id)
    if user is None:
        raise SubjectNotFoundException()

    return AuthContext(
        user_id=user.id,
        email=user.email,
        role=user.role,
        is_verified=bool(user.is_verified),
    )


def resolve_optional_identity(
    token: Optional[str],
    tokens: TokenService,
    users: UserRepository,
) -> Optional[AuthContext]:
    """Like resolve_identity, but any authentication failure means anonymous."""
    if not token:
        return None
    try:
        return resolve_identity(token, tokens, users)
    except UnauthorizedException:
        return None
