"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from listindia.domain.models.user import UserRole


class UserCreate(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = UserRole.CUSTOMER

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("role")
    @classmethod
    def no_self_registered_admins(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError("role must be customer or business")
        return value


class UserUpdate(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    is_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class TokenIdentity(BaseModel):
    """Claims carried inside an access token."""
    user_id: int
    email: str
    role: UserRole

    model_config = {"frozen": True}


class AuthContext(BaseModel):
    """Identity resolved for the current request from the credential store."""
    user_id: int
    email: str
    role: UserRole
    is_verified: bool

    model_config = {"frozen": True}
