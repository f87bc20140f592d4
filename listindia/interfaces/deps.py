"""
API Dependencies — repositories and services bound to the request session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from listindia.application.services.rating_aggregator import RatingAggregator
from listindia.application.services.token_service import TokenService, get_token_service
from listindia.domain.models.business import Business
from listindia.domain.models.review import Review
from listindia.domain.models.user import User
from listindia.domain.repositories.business_repository import BusinessRepository
from listindia.domain.repositories.review_repository import ReviewRepository
from listindia.domain.repositories.user_repository import UserRepository
from listindia.infrastructure.database import get_db
from listindia.infrastructure.repositories.business_repository import SQLAlchemyBusinessRepository
from listindia.infrastructure.repositories.review_repository import SQLAlchemyReviewRepository
from listindia.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_business_repository(db: Session = Depends(get_db)) -> BusinessRepository:
    """Get business repository instance."""
    return SQLAlchemyBusinessRepository(db, Business)


def get_review_repository(db: Session = Depends(get_db)) -> ReviewRepository:
    """Get review repository instance."""
    return SQLAlchemyReviewRepository(db, Review)


def get_rating_aggregator(
    businesses: BusinessRepository = Depends(get_business_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
) -> RatingAggregator:
    return RatingAggregator(businesses, reviews)


def get_tokens() -> TokenService:
    return get_token_service()
