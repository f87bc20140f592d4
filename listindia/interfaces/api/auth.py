"""Auth API routes — register, login, me."""

from fastapi import APIRouter, Depends, status

from listindia.application.services import auth_service
from listindia.application.services.token_service import TokenService
from listindia.core.exceptions import SubjectNotFoundException
from listindia.domain.repositories.user_repository import UserRepository
from listindia.domain.schemas.auth import AuthContext, LoginRequest, TokenResponse, UserCreate, UserRead
from listindia.interfaces.api.deps import get_current_user
from listindia.interfaces.deps import get_tokens, get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_tokens),
):
    return auth_service.register_user(users, tokens, body)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_tokens),
):
    return auth_service.login(users, tokens, body.email, body.password)


@router.get("/me", response_model=UserRead)
def get_me(
    identity: AuthContext = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = users.get_by_id(identity.user_id)
    if user is None:
        raise SubjectNotFoundException()
    return UserRead.model_validate(user)
