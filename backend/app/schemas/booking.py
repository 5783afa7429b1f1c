# backend/app/schemas/booking.py
"""
Booking request and response schemas.
"""

import datetime as dt
from typing import List, Optional

from pydantic import Field

from ..models.booking import Booking, BookingStatus, LessonType
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money


class BookingCreate(StrictRequestModel):
    """
    Book a lesson with an approved coach.

    ``time`` is the coach's local wall-clock time, ``"HH:MM"`` or ``"h:MM AM"``.
    """

    coach_id: str = Field(..., min_length=1)
    date: dt.date
    time: str = Field(..., min_length=1, max_length=10)
    duration: int = Field(..., description="Lesson length in minutes")
    lesson_type: LessonType = LessonType.INDIVIDUAL
    location: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)


class BookingStatusUpdate(StrictRequestModel):
    status: str = Field(..., description=", ".join(s.value for s in BookingStatus))


class BookingResponse(StrictModel):
    id: str
    student_id: str
    student_name: str
    coach_id: str
    coach_name: str
    date: dt.date
    time: str
    end_time: str
    duration: int
    lesson_type: str
    location: Optional[str] = None
    notes: Optional[str] = None
    status: str
    total_amount: Money
    created_at: dt.datetime
    confirmed_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    cancelled_at: Optional[dt.datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            student_id=booking.student_id,
            student_name=booking.student.name if booking.student else "",
            coach_id=booking.coach_id,
            coach_name=booking.coach.name if booking.coach else "",
            date=booking.booking_date,
            time=booking.start_time.strftime("%H:%M"),
            end_time=booking.end_time.strftime("%H:%M"),
            duration=booking.duration_minutes,
            lesson_type=booking.lesson_type,
            location=booking.location,
            notes=booking.notes,
            status=booking.status,
            total_amount=booking.total_amount,
            created_at=booking.created_at,
            confirmed_at=booking.confirmed_at,
            completed_at=booking.completed_at,
            cancelled_at=booking.cancelled_at,
        )


class BookingListResponse(StrictModel):
    bookings: List[BookingResponse]
