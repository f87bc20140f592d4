"""Business API routes — browse, search and manage listings."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from listindia.application.services import business_service
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.schemas.auth import AuthContext
from listindia.domain.schemas.business import (
    BusinessCreate,
    BusinessPage,
    BusinessRead,
    BusinessUpdate,
    CategoryCount,
    CityCount,
)
from listindia.interfaces.api.deps import get_current_user, get_optional_user, require_business_owner
from listindia.interfaces.deps import get_business_repository

router = APIRouter(prefix="/api/businesses", tags=["Businesses"])


@router.get("/categories", response_model=list[CategoryCount])
def list_categories(repo: BusinessRepository = Depends(get_business_repository)):
    return business_service.get_categories(repo)


@router.get("/cities", response_model=list[CityCount])
def list_cities(repo: BusinessRepository = Depends(get_business_repository)):
    return business_service.get_cities(repo)


@router.get("/featured", response_model=list[BusinessRead])
def list_featured(repo: BusinessRepository = Depends(get_business_repository)):
    return [BusinessRead.model_validate(b) for b in business_service.get_featured(repo)]


@router.get("", response_model=BusinessPage)
def list_businesses(
    category: Optional[str] = None,
    city: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    sort: str = "created_at",
    order: str = "desc",
    repo: BusinessRepository = Depends(get_business_repository),
    identity: Optional[AuthContext] = Depends(get_optional_user),
):
    filters = business_service.build_filter(
        category=category,
        city=city,
        search=search,
        featured=featured,
        sort=sort,
        order=order,
        limit=limit,
        offset=offset,
    )
    return business_service.get_businesses(repo, filters, identity)


@router.get("/{business_id}", response_model=BusinessRead)
def get_business(business_id: int, repo: BusinessRepository = Depends(get_business_repository)):
    return BusinessRead.model_validate(business_service.get_business(repo, business_id))


@router.post("", response_model=BusinessRead, status_code=status.HTTP_201_CREATED)
def create_business(
    body: BusinessCreate,
    repo: BusinessRepository = Depends(get_business_repository),
    identity: AuthContext = Depends(require_business_owner),
):
    return BusinessRead.model_validate(business_service.create_business(repo, identity, body))


@router.put("/{business_id}", response_model=BusinessRead)
def update_business(
    business_id: int,
    body: BusinessUpdate,
    repo: BusinessRepository = Depends(get_business_repository),
    identity: AuthContext = Depends(get_current_user),
):
    return BusinessRead.model_validate(business_service.update_business(repo, identity, business_id, body))


@router.delete("/{business_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_business(
    business_id: int,
    repo: BusinessRepository = Depends(get_business_repository),
    identity: AuthContext = Depends(get_current_user),
):
    business_service.delete_business(repo, identity, business_id)
