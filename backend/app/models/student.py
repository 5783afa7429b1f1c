# backend/app/models/student.py
"""Student profile model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class StudentProfile(Base):
    """
    Profile of a student, created together with the student's user account.

    Bookings and reviews reference ``students.id``; conversations reference
    the owning ``users.id``.
    """

    __tablename__ = "students"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    skill_level = Column(String(50), nullable=True)
    preferences = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", back_populates="student_profile")
    bookings = relationship("Booking", back_populates="student", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<StudentProfile {self.id} {self.name!r}>"
