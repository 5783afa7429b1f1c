# backend/app/schemas/coach.py
"""
Schemas for the coach directory and coach registration.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from ..models.coach import CoachProfile
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money


class CoachVideoPayload(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = Field(None, max_length=20)
    video_url: Optional[str] = None


class CoachRegisterRequest(StrictRequestModel):
    """Coach sign-up; the profile starts out pending admin approval."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    price_per_hour: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    years_experience: int = Field(0, ge=0, le=80)
    pga_certification_id: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None
    specialties: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    videos: List[CoachVideoPayload] = Field(default_factory=list)
    timezone: Optional[str] = Field(None, max_length=50)

    @field_validator("specialties", "tools", "certifications")
    @classmethod
    def _no_long_entries(cls, values: List[str]) -> List[str]:
        if any(len(v) > 255 for v in values):
            raise ValueError("entries cannot exceed 255 characters")
        return values


class CoachProfileUpdate(StrictRequestModel):
    """
    Partial edit of a coach's own profile.

    Only the fields present in the body change. A list that is sent
    replaces the stored list entirely.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    price_per_hour: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    years_experience: Optional[int] = Field(None, ge=0, le=80)
    pga_certification_id: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None
    specialties: Optional[List[str]] = None
    tools: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    videos: Optional[List[CoachVideoPayload]] = None

    @field_validator("specialties", "tools", "certifications")
    @classmethod
    def _no_long_entries(cls, values: Optional[List[str]]) -> Optional[List[str]]:
        if values and any(len(v) > 255 for v in values):
            raise ValueError("entries cannot exceed 255 characters")
        return values


class CoachVideoResponse(StrictModel):
    id: str
    title: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    video_url: Optional[str] = None


class CoachResponse(StrictModel):
    id: str
    user_id: str
    name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    price_per_hour: Money
    years_experience: int
    pga_certification_id: Optional[str] = None
    image: Optional[str] = None
    rating: float
    review_count: int
    approval_status: str
    specialties: List[str]
    tools: List[str]
    certifications: List[str]
    videos: List[CoachVideoResponse]
    created_at: dt.datetime

    @classmethod
    def from_profile(cls, coach: CoachProfile) -> "CoachResponse":
        return cls(
            id=coach.id,
            user_id=coach.user_id,
            name=coach.name,
            bio=coach.bio,
            location=coach.location,
            price_per_hour=coach.price_per_hour,
            years_experience=coach.years_experience or 0,
            pga_certification_id=coach.pga_certification_id,
            image=coach.image,
            rating=coach.rating or 0.0,
            review_count=coach.review_count or 0,
            approval_status=coach.approval_status,
            specialties=coach.specialty_names,
            tools=coach.tool_names,
            certifications=coach.certification_names,
            videos=[CoachVideoResponse.model_validate(v) for v in coach.videos],
            created_at=coach.created_at,
        )


class AvailableTimesResponse(StrictModel):
    coach_id: str
    date: dt.date
    times: List[str]
