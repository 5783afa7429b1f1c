# backend/app/models/review.py
"""
Review model.

Design notes:
- One review per booking (DB unique constraint)
- Ratings are integers between 1 and 5
- The coach's aggregate rating is kept on ``coaches.rating`` / ``review_count``
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Review(Base):
    """Per-booking review submitted by the booking's student."""

    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26),
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    booking = relationship("Booking", back_populates="review")
    coach = relationship("CoachProfile")
    student = relationship("StudentProfile")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("idx_reviews_coach", "coach_id"),
    )
