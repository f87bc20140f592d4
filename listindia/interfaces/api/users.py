"""User API routes — own profile and own listings."""

from fastapi import APIRouter, Depends, Query

from listindia.application.services import auth_service, business_service
from listindia.core.exceptions import EntityNotFoundException
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.repositories.user_repository import UserRepository
from listindia.domain.schemas.auth import AuthContext, UserRead, UserUpdate
from listindia.domain.schemas.business import BusinessPage
from listindia.interfaces.api.deps import get_current_user
from listindia.interfaces.deps import get_business_repository, get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile", response_model=UserRead)
def get_profile(
    identity: AuthContext = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = users.get_by_id(identity.user_id)
    if user is None:
        raise EntityNotFoundException("User profile not found")
    return UserRead.model_validate(user)


@router.put("/profile", response_model=UserRead)
def update_profile(
    body: UserUpdate,
    identity: AuthContext = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = users.get_by_id(identity.user_id)
    if user is None:
        raise EntityNotFoundException("User not found")
    return UserRead.model_validate(auth_service.update_profile(users, user, body))


@router.get("/businesses", response_model=BusinessPage)
def my_businesses(
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    identity: AuthContext = Depends(get_current_user),
    repo: BusinessRepository = Depends(get_business_repository),
):
    """Businesses owned by the caller, including unapproved ones."""
    return business_service.get_owner_businesses(repo, identity, limit, offset)
