# backend/app/schemas/auth.py
"""
Request and response schemas for registration and login.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ..models.user import User
from ._strict_base import StrictModel, StrictRequestModel


class StudentRegisterRequest(StrictRequestModel):
    """Student sign-up; creates the account and the student profile."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    skill_level: Optional[str] = Field(None, max_length=50)
    preferences: Optional[str] = Field(None, max_length=1000)
    timezone: Optional[str] = Field(None, max_length=50)


class LoginRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(StrictModel):
    id: str
    email: str
    role: str
    name: str
    timezone: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            name=user.display_name,
            timezone=user.timezone,
            created_at=user.created_at,
        )


class LoginResponse(StrictModel):
    """Session token (also set as an HttpOnly cookie) plus the user."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class LogoutResponse(StrictModel):
    success: bool = True
