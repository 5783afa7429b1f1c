# backend/tests/conftest.py
"""
Pytest configuration and shared fixtures.

Tests run against an in-memory SQLite database. The API client shares the
test's session through a ``get_db`` override, so data created by fixtures
is visible to requests and vice versa.
"""

from datetime import date, time, timedelta
from decimal import Decimal
import os
import sys

# CRITICAL: Set testing mode BEFORE any app imports!
os.environ["is_testing"] = "true"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from typing import Any, Callable, Dict, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies.database import get_db
from app.auth import create_access_token, get_password_hash
from app.core.enums import ApprovalStatus, RoleName
from app.database import Base, create_app_engine
from app.main import app
from app.models.booking import Booking, BookingStatus
from app.models.coach import CoachProfile, CoachSpecialty, CoachTool
from app.models.student import StudentProfile
from app.models.user import User
from app.principal import AuthenticatedUser

TEST_PASSWORD = "Password123!"

test_engine = create_app_engine("sqlite+pysqlite:///:memory:")
TestSessionLocal = sessionmaker(
    bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False
)

# bcrypt is slow even with 4 rounds; hash the shared password once
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="session", autouse=True)
def _schema() -> Any:
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


def _clear_tables() -> None:
    with test_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db() -> Any:
    """Session for one test; every table is emptied afterwards."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        _clear_tables()


@pytest.fixture
def client(db: Session) -> Any:
    def override_get_db() -> Any:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def user_factory(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def create(
        role: RoleName = RoleName.STUDENT,
        email: Optional[str] = None,
        timezone: str = "America/New_York",
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            hashed_password=_TEST_PASSWORD_HASH,
            role=role.value,
            timezone=timezone,
        )
        db.add(user)
        db.commit()
        return user

    return create


@pytest.fixture
def student_factory(db: Session, user_factory: Callable[..., User]) -> Callable[..., StudentProfile]:
    def create(name: str = "Sam Student", email: Optional[str] = None) -> StudentProfile:
        user = user_factory(RoleName.STUDENT, email=email)
        profile = StudentProfile(user_id=user.id, name=name, skill_level="beginner")
        db.add(profile)
        db.commit()
        db.refresh(user)
        return profile

    return create


@pytest.fixture
def coach_factory(db: Session, user_factory: Callable[..., User]) -> Callable[..., CoachProfile]:
    def create(
        name: str = "Casey Coach",
        price_per_hour: str = "80.00",
        approval_status: ApprovalStatus = ApprovalStatus.APPROVED,
        location: str = "Austin, TX",
        years_experience: int = 10,
        rating: float = 0.0,
        specialties: tuple = ("Putting",),
        tools: tuple = ("TrackMan",),
        email: Optional[str] = None,
        timezone: str = "America/New_York",
    ) -> CoachProfile:
        user = user_factory(RoleName.COACH, email=email, timezone=timezone)
        coach = CoachProfile(
            user_id=user.id,
            name=name,
            bio="PGA professional",
            location=location,
            price_per_hour=Decimal(price_per_hour),
            years_experience=years_experience,
            rating=rating,
            approval_status=approval_status.value,
        )
        coach.specialties = [CoachSpecialty(specialty=s) for s in specialties]
        coach.tools = [CoachTool(tool=t) for t in tools]
        db.add(coach)
        db.commit()
        db.refresh(user)
        return coach

    return create


@pytest.fixture
def booking_factory(db: Session) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing service validation (e.g. past lessons)."""

    def create(
        student: StudentProfile,
        coach: CoachProfile,
        booking_date: Optional[date] = None,
        start_time: time = time(10, 0),
        duration_minutes: int = 60,
        status: BookingStatus = BookingStatus.PENDING,
        total_amount: str = "80.00",
    ) -> Booking:
        booking = Booking(
            student_id=student.id,
            coach_id=coach.id,
            booking_date=booking_date or _future_date(),
            start_time=start_time,
            duration_minutes=duration_minutes,
            lesson_type="individual",
            status=status.value,
            total_amount=Decimal(total_amount),
        )
        db.add(booking)
        db.commit()
        return booking

    return create


@pytest.fixture
def student(student_factory: Callable[..., StudentProfile]) -> StudentProfile:
    return student_factory()


@pytest.fixture
def coach(coach_factory: Callable[..., CoachProfile]) -> CoachProfile:
    return coach_factory()


@pytest.fixture
def admin_user(user_factory: Callable[..., User]) -> User:
    return user_factory(RoleName.ADMIN, email="admin@example.com")


# ============================================================================
# Identity helpers
# ============================================================================


def _future_date(days: int = 7) -> date:
    return date.today() + timedelta(days=days)


def _principal_for(user: User) -> AuthenticatedUser:
    return AuthenticatedUser.from_user(user)


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    return auth_headers_for


@pytest.fixture
def principal_for() -> Callable[[User], AuthenticatedUser]:
    return _principal_for


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD
