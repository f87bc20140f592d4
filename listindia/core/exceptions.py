"""
Global exception handling for the application.
Standardizes error responses as {"error": {code, message, details, path}}.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""

    code = "AppError"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(self.message)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    code = "EntityNotFound"

    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictException(AppError):
    """Resource already exists."""
    code = "Conflict"

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class DuplicateReviewException(ConflictException):
    """A user already holds a review for this business."""
    code = "DuplicateReview"

    def __init__(self, message: str = "You have already reviewed this business", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class BusinessRuleViolationException(AppError):
    """Business logic violation error."""
    code = "BusinessRuleViolation"

    def __init__(self, message: str = "Business rule violation", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            status.HTTP_401_UNAUTHORIZED,
            details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenMissingException(UnauthorizedException):
    code = "TokenMissing"

    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class InvalidTokenException(UnauthorizedException):
    code = "InvalidToken"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredException(UnauthorizedException):
    code = "TokenExpired"

    def __init__(self, message: str = "Token has expired. Please login again."):
        super().__init__(message)


class TokenNotYetValidException(UnauthorizedException):
    code = "TokenNotYetValid"

    def __init__(self, message: str = "Token not active yet"):
        super().__init__(message)


class SubjectNotFoundException(UnauthorizedException):
    code = "SubjectNotFound"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class InvalidCredentialsException(UnauthorizedException):
    code = "InvalidCredentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class ForbiddenException(AppError):
    """Authorization failure error."""
    code = "Forbidden"

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class RoleForbiddenException(ForbiddenException):
    code = "RoleForbidden"


class NotVerifiedException(ForbiddenException):
    code = "NotVerified"

    def __init__(self, message: str = "Email verification required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class StoreUnavailableException(AppError):
    """The database could not be reached or did not answer in time."""
    code = "StoreUnavailable"

    def __init__(
        self,
        message: str = "Database connection error. Please try again later.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, details)


STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def _error_response(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
                "path": request.url.path,
            }
        },
        headers=exc.headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError with its own status code and code."""
    if exc.status_code >= 500:
        logger.warning("Request failed", code=exc.code, path=request.url.path, message=exc.message)
    return _error_response(request, exc)


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Connection loss and timeouts are a service outage, not a client error."""
    logger.error("Store unavailable", path=request.url.path, error=str(exc))
    return _error_response(request, StoreUnavailableException())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    if isinstance(exc, AppError):
        return _error_response(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    for error_type in STORE_ERRORS:
        app.add_exception_handler(error_type, store_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
