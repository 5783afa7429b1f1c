# backend/app/models/booking.py
"""
Booking model for the BookAPro platform.

A booking is a student's request for a lesson with a coach at a given date
and start time. Bookings start as ``pending`` and move through the lifecycle
declared in ``app.core.authz``. Price data is snapshotted at booking time.
"""

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
import logging
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Default - waiting for the coach
    CONFIRMED = "confirmed"  # Accepted by the coach
    COMPLETED = "completed"  # Lesson took place
    CANCELLED = "cancelled"  # Cancelled by either party or an admin

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """Statuses that still hold the coach's time."""
        return (cls.PENDING, cls.CONFIRMED)


class LessonType(str, Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"
    PLAYING = "playing"


class Booking(Base):
    """
    Lesson booking between a student profile and a coach profile.

    Attributes:
        student_id: ``students.id`` of the booking student
        coach_id: ``coaches.id`` of the booked coach
        booking_date / start_time: Lesson start in the coach's wall-clock time
        duration_minutes: One of the allowed lesson durations
        total_amount: ``price_per_hour * duration_minutes / 60`` at booking time
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    student_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)

    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    lesson_type = Column(String(20), nullable=False, default=LessonType.INDIVIDUAL.value)
    location = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    student = relationship("StudentProfile", back_populates="bookings")
    coach = relationship("CoachProfile", back_populates="bookings")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])
    review = relationship(
        "Review", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "lesson_type IN ('individual', 'group', 'playing')",
            name="ck_bookings_lesson_type",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        CheckConstraint("total_amount >= 0", name="check_amount_non_negative"),
        Index("idx_bookings_coach_date_status", "coach_id", "booking_date", "status"),
        Index("idx_bookings_student", "student_id"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: student={self.student_id}, "
            f"coach={self.coach_id}, date={self.booking_date}, "
            f"time={self.start_time}, status={self.status}>"
        )

    @property
    def starts_at(self) -> datetime:
        """Naive lesson start in the coach's wall-clock time."""
        return datetime.combine(self.booking_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=int(self.duration_minutes))

    @property
    def end_time(self) -> time:
        return self.ends_at.time()

    @property
    def is_active(self) -> bool:
        return self.status in {s.value for s in BookingStatus.active()}

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """True when [start, end) intersects this booking's interval."""
        return self.starts_at < end and start < self.ends_at

    def is_upcoming(self, today: date) -> bool:
        return self.booking_date >= today and self.is_active

    def mark_status(
        self, new_status: BookingStatus, at: datetime, actor_id: Optional[str] = None
    ) -> None:
        """Apply ``new_status`` and stamp the matching timestamp column."""
        self.status = new_status.value
        if new_status == BookingStatus.CONFIRMED:
            self.confirmed_at = at
        elif new_status == BookingStatus.COMPLETED:
            self.completed_at = at
        elif new_status == BookingStatus.CANCELLED:
            self.cancelled_at = at
            self.cancelled_by_id = actor_id
        logger.info(f"Booking {self.id} moved to {new_status.value}")
