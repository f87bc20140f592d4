"""Token service — issues and verifies signed bearer tokens (JWT)."""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from listindia.config import get_settings
from listindia.core.exceptions import (
    InvalidTokenException,
    TokenExpiredException,
    TokenNotYetValidException,
)
from listindia.domain.models.user import UserRole
from listindia.domain.schemas.auth import TokenIdentity


class TokenService:
    """Issues and verifies access tokens with a fixed signing key.

    The key and claim settings are bound at construction and never change
    afterwards; build one instance per process via ``get_token_service``.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "listindia-api",
        audience: str = "listindia-frontend",
        expires_in: timedelta = timedelta(days=7),
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expires_in = expires_in

    def issue(
        self,
        identity: TokenIdentity,
        expires_delta: Optional[timedelta] = None,
        not_before: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(identity.user_id),
            "email": identity.email,
            "role": identity.role.value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + (expires_delta if expires_delta is not None else self.expires_in),
        }
        if not_before is not None:
            claims["nbf"] = not_before
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """Validate signature, audience, issuer and time claims.

        Raises TokenExpiredException, TokenNotYetValidException or
        InvalidTokenException so callers can tell the cases apart.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                # nbf is checked below so it maps to its own failure kind
                options={"verify_nbf": False},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredException() from exc
        except JWTError as exc:
            raise InvalidTokenException() from exc

        not_before = payload.get("nbf")
        if not_before is not None:
            if not isinstance(not_before, (int, float)):
                raise InvalidTokenException()
            if datetime.now(timezone.utc).timestamp() < not_before:
                raise TokenNotYetValidException()

        try:
            return TokenIdentity(
                user_id=int(payload["sub"]),
                email=payload["email"],
                role=UserRole(payload["role"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenException() from exc


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
        expires_in=timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
    )
