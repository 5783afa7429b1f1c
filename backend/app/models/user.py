# backend/app/models/user.py
"""
User model for the BookAPro platform.

Students, coaches and admins all log in as a ``User``. The ``role`` column
decides which profile table (``students`` or ``coaches``) holds the rest of
the person's data.

Classes:
    User: Authentication record and role holder
"""

from datetime import datetime, timezone as dt_timezone
import logging

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import AuthProvider, RoleName
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Main user model for authentication and role management.

    Attributes:
        id: ULID primary key
        email: Unique email address used for login
        hashed_password: Bcrypt hash, empty for users from an external provider
        role: One of ``RoleName`` (student, coach, admin)
        auth_provider: Where the credentials live (local or google)
        timezone: IANA timezone used to interpret lesson wall-clock times
        is_active: Whether the account can log in

    Relationships:
        coach_profile: One-to-one with CoachProfile (coaches only)
        student_profile: One-to-one with StudentProfile (students only)
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False, default="")
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value)
    auth_provider = Column(String(20), nullable=False, default=AuthProvider.LOCAL.value)
    timezone = Column(String(50), nullable=False, default="America/New_York")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(dt_timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    coach_profile = relationship(
        "CoachProfile",
        back_populates="user",
        uselist=False,
        foreign_keys="CoachProfile.user_id",
        cascade="all, delete-orphan",
    )
    student_profile = relationship(
        "StudentProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'coach', 'student')", name="ck_users_role"),
        CheckConstraint("auth_provider IN ('local', 'google')", name="ck_users_auth_provider"),
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    @property
    def is_coach(self) -> bool:
        return self.role == RoleName.COACH.value

    @property
    def is_student(self) -> bool:
        return self.role == RoleName.STUDENT.value

    @property
    def display_name(self) -> str:
        """Name from the user's profile, falling back to the email address."""
        if self.coach_profile is not None and self.coach_profile.name:
            return str(self.coach_profile.name)
        if self.student_profile is not None and self.student_profile.name:
            return str(self.student_profile.name)
        return str(self.email)
