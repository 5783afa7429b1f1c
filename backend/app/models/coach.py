# backend/app/models/coach.py
"""
Coach profile models for the BookAPro platform.

A coach is a ``User`` with role ``coach`` plus a ``CoachProfile`` row. The
profile only shows up in public listings once an admin approves it.
Specialties, tools, certifications and videos live in child tables owned by
the profile.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import ApprovalStatus
from ..database import Base


class CoachProfile(Base):
    """
    Public profile of a golf coach.

    Attributes:
        id: ULID primary key (the id bookings and reviews reference)
        user_id: Owning user (one-to-one)
        name: Display name
        price_per_hour: Hourly rate in dollars
        rating: Average review rating, 0 until the first review
        review_count: Number of reviews received
        approval_status: pending, approved or rejected
        approved_by: Admin user who approved or rejected the profile

    Business Rules:
        - Each user has at most one coach profile
        - Only approved profiles are listed, searched or bookable
    """

    __tablename__ = "coaches"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    years_experience = Column(Integer, nullable=False, default=0)
    pga_certification_id = Column(String(100), nullable=True)
    image = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    approval_status = Column(
        String(20), nullable=False, default=ApprovalStatus.PENDING.value, index=True
    )
    approved_by = Column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="coach_profile", foreign_keys=[user_id])
    specialties = relationship(
        "CoachSpecialty", back_populates="coach", cascade="all, delete-orphan", lazy="selectin"
    )
    tools = relationship(
        "CoachTool", back_populates="coach", cascade="all, delete-orphan", lazy="selectin"
    )
    certifications = relationship(
        "CoachCertification", back_populates="coach", cascade="all, delete-orphan", lazy="selectin"
    )
    videos = relationship(
        "CoachVideo", back_populates="coach", cascade="all, delete-orphan", lazy="selectin"
    )
    bookings = relationship("Booking", back_populates="coach", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "approval_status IN ('pending', 'approved', 'rejected')",
            name="ck_coaches_approval_status",
        ),
        CheckConstraint("price_per_hour > 0", name="check_coach_rate_positive"),
        CheckConstraint("years_experience >= 0", name="check_years_experience_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<CoachProfile {self.id} {self.name!r} ({self.approval_status})>"

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value

    @property
    def specialty_names(self) -> list[str]:
        return [s.specialty for s in self.specialties]

    @property
    def tool_names(self) -> list[str]:
        return [t.tool for t in self.tools]

    @property
    def certification_names(self) -> list[str]:
        return [c.certification for c in self.certifications]


class CoachSpecialty(Base):
    __tablename__ = "coach_specialties"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)
    specialty = Column(String(255), nullable=False)

    coach = relationship("CoachProfile", back_populates="specialties")

    __table_args__ = (Index("idx_coach_specialties_coach", "coach_id"),)


class CoachTool(Base):
    __tablename__ = "coach_tools"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)
    tool = Column(String(255), nullable=False)

    coach = relationship("CoachProfile", back_populates="tools")

    __table_args__ = (Index("idx_coach_tools_coach", "coach_id"),)


class CoachCertification(Base):
    __tablename__ = "coach_certifications"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)
    certification = Column(String(255), nullable=False)

    coach = relationship("CoachProfile", back_populates="certifications")


class CoachVideo(Base):
    """Instructional video linked from a coach profile."""

    __tablename__ = "coach_videos"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail = Column(Text, nullable=True)
    duration = Column(String(20), nullable=True)
    video_url = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    coach = relationship("CoachProfile", back_populates="videos")
