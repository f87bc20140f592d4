"""Pydantic schemas for Business listings."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator

from listindia.domain.models.business import BusinessCategory

SortField = Literal["name", "rating", "review_count", "created_at"]
SortOrder = Literal["asc", "desc"]


class BusinessBase(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=1000)
    category: BusinessCategory
    address: str = Field(min_length=1)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    phone: str = Field(min_length=1, max_length=20)
    email: EmailStr
    website: Optional[HttpUrl] = None
    image_url: Optional[HttpUrl] = None

    @field_validator("name", "description", "address", "city", "state", "zip_code", "phone", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("category", mode="before")
    @classmethod
    def lower_category(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class BusinessCreate(BusinessBase):
    pass


class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    category: Optional[BusinessCategory] = None
    address: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[HttpUrl] = None
    image_url: Optional[HttpUrl] = None

    model_config = {"extra": "forbid"}

    @field_validator(
        "name", "description", "category", "address", "city", "state", "zip_code", "phone", "email"
    )
    @classmethod
    def required_columns_not_null(cls, value, info):
        # Only website and image_url may be cleared with null
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def lower_category(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class BusinessRead(BaseModel):
    id: int
    name: str
    description: str
    category: BusinessCategory
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    email: str
    website: Optional[str] = None
    image_url: Optional[str] = None
    rating: float
    review_count: int
    is_featured: bool
    is_approved: bool
    owner_id: Optional[int] = None
    is_owner: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BusinessFilter(BaseModel):
    category: Optional[BusinessCategory] = None
    city: Optional[str] = None
    search: Optional[str] = None
    featured: Optional[bool] = None
    owner_id: Optional[int] = None
    approved_only: bool = True
    sort: str = "created_at"
    order: str = "desc"
    limit: int = 50
    offset: int = 0


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool
    total_pages: int
    current_page: int

    @classmethod
    def build(cls, total: int, limit: int, offset: int) -> "Pagination":
        return cls(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
            total_pages=(total + limit - 1) // limit,
            current_page=offset // limit + 1,
        )


class BusinessPage(BaseModel):
    items: list[BusinessRead]
    pagination: Pagination


class CategoryCount(BaseModel):
    value: str
    label: str
    count: int


class CityCount(BaseModel):
    city: str
    state: str
    label: str
    count: int
