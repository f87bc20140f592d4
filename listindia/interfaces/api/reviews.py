"""Review API routes — write reviews and read them per business or per user."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from listindia.application.services import review_service
from listindia.application.services.rating_aggregator import RatingAggregator
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.repositories.review_repository import ReviewRepository
from listindia.domain.schemas.auth import AuthContext
from listindia.domain.schemas.review import (
    ReviewCreate,
    ReviewFilter,
    ReviewMutationResult,
    ReviewPage,
    ReviewRead,
    ReviewStats,
    ReviewUpdate,
)
from listindia.interfaces.api.deps import get_current_user, get_optional_user
from listindia.interfaces.deps import get_business_repository, get_rating_aggregator, get_review_repository

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewMutationResult, status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    reviews: ReviewRepository = Depends(get_review_repository),
    businesses: BusinessRepository = Depends(get_business_repository),
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
    identity: AuthContext = Depends(get_current_user),
):
    return review_service.create_review(reviews, businesses, aggregator, identity, body)


@router.get("/user/my-reviews", response_model=ReviewPage)
def my_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    sort_by: Literal["created_at", "rating", "updated_at"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    reviews: ReviewRepository = Depends(get_review_repository),
    identity: AuthContext = Depends(get_current_user),
):
    filters = ReviewFilter(sort_by=sort_by, order=order, page=page, limit=limit)
    return review_service.get_user_reviews(reviews, identity, filters)


@router.get("/business/{business_id}", response_model=ReviewPage)
def business_reviews(
    business_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    sort_by: Literal["created_at", "rating", "updated_at"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    reviews: ReviewRepository = Depends(get_review_repository),
    businesses: BusinessRepository = Depends(get_business_repository),
    identity: Optional[AuthContext] = Depends(get_optional_user),
):
    filters = ReviewFilter(sort_by=sort_by, order=order, page=page, limit=limit)
    return review_service.get_business_reviews(reviews, businesses, business_id, filters, identity)


@router.get("/business/{business_id}/stats", response_model=ReviewStats)
def business_review_stats(
    business_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    businesses: BusinessRepository = Depends(get_business_repository),
):
    return review_service.get_review_stats(reviews, businesses, business_id)


@router.get("/{review_id}", response_model=ReviewRead)
def get_review(
    review_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    identity: Optional[AuthContext] = Depends(get_optional_user),
):
    return review_service.get_review(reviews, review_id, identity)


@router.put("/{review_id}", response_model=ReviewMutationResult)
def update_review(
    review_id: int,
    body: ReviewUpdate,
    reviews: ReviewRepository = Depends(get_review_repository),
    businesses: BusinessRepository = Depends(get_business_repository),
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
    identity: AuthContext = Depends(get_current_user),
):
    return review_service.update_review(reviews, businesses, aggregator, identity, review_id, body)


@router.delete("/{review_id}", response_model=ReviewMutationResult)
def delete_review(
    review_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    businesses: BusinessRepository = Depends(get_business_repository),
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
    identity: AuthContext = Depends(get_current_user),
):
    return review_service.delete_review(reviews, businesses, aggregator, identity, review_id)
