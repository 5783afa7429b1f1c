# backend/app/schemas/admin.py
"""
Admin dashboard schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..models.student import StudentProfile
from ._strict_base import StrictModel, StrictRequestModel
from .booking import BookingResponse
from .coach import CoachResponse


class CoachRejectRequest(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=500)


class CoachListResponse(StrictModel):
    coaches: List[CoachResponse]


class StudentResponse(StrictModel):
    id: str
    user_id: str
    email: str
    name: str
    phone: Optional[str] = None
    skill_level: Optional[str] = None
    preferences: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_profile(cls, student: StudentProfile) -> "StudentResponse":
        return cls(
            id=student.id,
            user_id=student.user_id,
            email=student.user.email if student.user else "",
            name=student.name,
            phone=student.phone,
            skill_level=student.skill_level,
            preferences=student.preferences,
            created_at=student.created_at,
        )


class StudentListResponse(StrictModel):
    students: List[StudentResponse]


class AdminBookingListResponse(StrictModel):
    bookings: List[BookingResponse]


class AdminActionResponse(StrictModel):
    id: str
    admin_id: Optional[str] = None
    action: str
    target_type: str
    target_id: str
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


class AdminActionListResponse(StrictModel):
    actions: List[AdminActionResponse]


class DeleteResponse(StrictModel):
    success: bool = True
    id: str
