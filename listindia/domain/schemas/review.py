"""Pydantic schemas for Reviews."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from listindia.domain.schemas.business import Pagination


class ReviewCreate(BaseModel):
    business_id: int = Field(ge=1)
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, min_length=10, max_length=1000)

    @field_validator("comment", mode="before")
    @classmethod
    def blank_comment_is_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, min_length=10, max_length=1000)

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, value):
        # Omitted means unchanged, explicit null is rejected
        if value is None:
            raise ValueError("rating cannot be null")
        return value

    @field_validator("comment", mode="before")
    @classmethod
    def blank_comment_is_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class ReviewAuthor(BaseModel):
    id: int
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class ReviewRead(BaseModel):
    id: int
    business_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    user: Optional[ReviewAuthor] = None
    is_owner: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReviewFilter(BaseModel):
    sort_by: str = "created_at"
    order: str = "desc"
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ReviewPage(BaseModel):
    items: list[ReviewRead]
    pagination: Pagination


class ReviewStats(BaseModel):
    business_id: int
    total_reviews: int
    average_rating: float
    distribution: dict[int, int]


class ReviewMutationResult(BaseModel):
    """Review write response, including the refreshed business aggregate."""
    review: Optional[ReviewRead] = None
    # None when the store could not be read after the write committed
    business_rating: Optional[float] = None
    business_review_count: Optional[int] = None
