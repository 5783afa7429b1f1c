# backend/app/services/booking_service.py
"""
Booking Service for the BookAPro platform

Handles all booking-related business logic including:
- Creating lesson bookings with price computation
- Preventing overlapping bookings for the same coach
- Driving the booking status lifecycle
- Listing bookings for participants
- Computing a coach's available times for a day
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
import logging
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.authz import allowed_targets, can_transition, is_transition_allowed
from ..core.config import settings
from ..core.constants import (
    DEFAULT_DAILY_SLOTS,
    ERROR_BOOKING_NOT_FOUND,
    ERROR_COACH_NOT_FOUND,
    SLOT_LENGTH_MINUTES,
)
from ..core.exceptions import (
    BookingConflictException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import get_user_now
from ..models.booking import Booking, BookingStatus, LessonType
from ..models.coach import CoachProfile
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import AuthenticatedUser
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

_TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_lesson_time(value: str) -> time:
    """
    Parse a lesson start time.

    Accepts ``"HH:MM"`` / ``"HH:MM:SS"`` (24-hour) and ``"h:MM AM"`` (12-hour).

    Raises:
        ValidationException: If the value is not a valid time
    """
    text = (value or "").strip()
    match = _TWELVE_HOUR.match(text)
    if match:
        hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).upper()
        if 1 <= hour <= 12 and 0 <= minute <= 59:
            hour = hour % 12 + (12 if meridiem == "PM" else 0)
            return time(hour, minute)
    else:
        match = _TWENTY_FOUR_HOUR.match(text)
        if match:
            hour, minute = int(match.group(1)), int(match.group(2))
            second = int(match.group(3) or 0)
            if 0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59:
                return time(hour, minute, second)
    raise ValidationException(f"Invalid time: {value!r}", details={"time": value})


def compute_total_amount(price_per_hour: Decimal, duration_minutes: int) -> Decimal:
    """``price_per_hour * duration / 60`` rounded half-up to cents."""
    amount = Decimal(price_per_hour) * Decimal(duration_minutes) / Decimal(60)
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    The caller is always passed in explicitly. Status changes check
    participation first, then the lifecycle, then the role permissions
    declared in ``app.core.authz``.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.student_repository = RepositoryFactory.create_student_repository(db)
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        principal: AuthenticatedUser,
        coach_id: str,
        booking_date: date,
        start_time: str | time,
        duration_minutes: int,
        lesson_type: str = LessonType.INDIVIDUAL.value,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Create a pending booking for the calling student.

        Args:
            principal: Caller; must be a student with a profile
            coach_id: ``coaches.id`` of an approved coach
            booking_date: Lesson date (coach's local calendar)
            start_time: Lesson start, ``"HH:MM"`` or ``"h:MM AM"``
            duration_minutes: One of the allowed durations
            lesson_type: individual, group or playing

        Returns:
            The persisted booking with status ``pending``

        Raises:
            ForbiddenException: Caller is not a student with a profile
            ValidationException: Invalid time, duration, lesson type or a past start
            NotFoundException: Coach missing or not approved
            BookingConflictException: Overlaps an active booking of the coach
        """
        if not principal.is_student:
            raise ForbiddenException("Only students can create bookings")
        student = self.student_repository.get_by_user_id(principal.id)
        if student is None:
            raise ForbiddenException("A student profile is required to book lessons")

        self._validate_booking_inputs(duration_minutes, lesson_type)
        lesson_start = start_time if isinstance(start_time, time) else parse_lesson_time(start_time)

        with self.transaction():
            coach = self.coach_repository.lock_for_booking(coach_id)
            if coach is None or not coach.is_approved:
                raise NotFoundException(ERROR_COACH_NOT_FOUND, details={"coach_id": coach_id})

            starts_at = datetime.combine(booking_date, lesson_start)
            if starts_at <= get_user_now(coach.user):
                raise ValidationException(
                    "Cannot book lessons in the past",
                    details={"date": booking_date.isoformat(), "time": lesson_start.isoformat()},
                )

            if settings.booking_prevent_overlap:
                self._check_conflicts(
                    coach, starts_at, starts_at + timedelta(minutes=duration_minutes)
                )

            booking = self.repository.create(
                student_id=student.id,
                coach_id=coach.id,
                booking_date=booking_date,
                start_time=lesson_start,
                duration_minutes=duration_minutes,
                lesson_type=lesson_type,
                location=location,
                notes=notes,
                status=BookingStatus.PENDING.value,
                total_amount=compute_total_amount(coach.price_per_hour, duration_minutes),
            )

        prometheus_metrics.inc_booking_created(lesson_type)
        self.log_operation(
            "booking_created",
            booking_id=booking.id,
            student_id=student.id,
            coach_id=coach.id,
            booking_date=booking_date.isoformat(),
            duration_minutes=duration_minutes,
        )
        return booking

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self,
        principal: AuthenticatedUser,
        booking_id: str,
        new_status: str | BookingStatus,
    ) -> Booking:
        """
        Move a booking to ``new_status``.

        Raises:
            ValidationException: Unknown status, or completing before the lesson start
            NotFoundException: Unknown booking
            ForbiddenException: Caller is not a participant/admin, or their
                role may not drive this transition
            InvalidTransitionException: The transition is not in the lifecycle
        """
        try:
            requested = BookingStatus(new_status)
        except ValueError:
            raise ValidationException(
                f"Unknown booking status: {new_status}",
                details={"allowed": [s.value for s in BookingStatus]},
            )

        with self.transaction():
            booking = self.repository.get_booking_with_details(booking_id)
            if booking is None:
                raise NotFoundException(ERROR_BOOKING_NOT_FOUND)
            self._require_participant(principal, booking)

            current = BookingStatus(booking.status)
            if not is_transition_allowed(current, requested):
                raise InvalidTransitionException(current.value, requested.value)
            if not can_transition(principal.role, current, requested):
                allowed = [s.value for s in allowed_targets(principal.role, current)]
                raise ForbiddenException(
                    f"A {principal.role.value} cannot change a booking from "
                    f"{current.value} to {requested.value}",
                    details={"allowed": allowed},
                )
            if requested == BookingStatus.COMPLETED:
                if booking.starts_at > get_user_now(booking.coach.user):
                    raise ValidationException("Cannot complete a lesson before it starts")

            booking.mark_status(requested, datetime.now(timezone.utc), actor_id=principal.id)

        prometheus_metrics.inc_booking_transition(current.value, requested.value)
        self.log_operation(
            "booking_status_changed",
            booking_id=booking.id,
            from_status=current.value,
            to_status=requested.value,
            actor_id=principal.id,
        )
        return booking

    @BaseService.measure_operation("list_bookings_for_user")
    def list_bookings_for_user(self, principal: AuthenticatedUser) -> List[Booking]:
        """
        Bookings where the caller is the student or the coach.

        Newest lesson first. Admins see only bookings they take part in;
        the full listing is ``AdminService.list_bookings``.
        """
        student = self.student_repository.get_by_user_id(principal.id)
        coach = self.coach_repository.get_by_user_id(principal.id)
        return self.repository.get_bookings_for_participant(
            student_profile_id=student.id if student else None,
            coach_profile_id=coach.id if coach else None,
        )

    @BaseService.measure_operation("get_booking")
    def get_booking(self, principal: AuthenticatedUser, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException(ERROR_BOOKING_NOT_FOUND)
        self._require_participant(principal, booking)
        return booking

    @BaseService.measure_operation("get_available_times")
    def get_available_times(self, coach_id: str, booking_date: date) -> List[str]:
        """
        Default daily slots of an approved coach that are still free.

        A slot is dropped when its hour overlaps an active booking, or when
        it has already started.
        """
        coach = self.coach_repository.get_approved_by_id(coach_id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND, details={"coach_id": coach_id})

        day_start = datetime.combine(booking_date, time.min)
        active = self._active_bookings_within(coach.id, day_start, day_start + timedelta(days=1))
        now = get_user_now(coach.user)

        available = []
        for slot in DEFAULT_DAILY_SLOTS:
            slot_start = datetime.combine(booking_date, parse_lesson_time(slot))
            slot_end = slot_start + timedelta(minutes=SLOT_LENGTH_MINUTES)
            if slot_start <= now:
                continue
            if any(b.overlaps(slot_start, slot_end) for b in active):
                continue
            available.append(slot)
        return available

    # Helpers

    def _validate_booking_inputs(self, duration_minutes: int, lesson_type: str) -> None:
        allowed = tuple(settings.allowed_booking_durations)
        if duration_minutes not in allowed:
            raise ValidationException(
                f"Duration must be one of {', '.join(str(d) for d in allowed)} minutes",
                details={"duration": duration_minutes, "allowed": list(allowed)},
            )
        if lesson_type not in {t.value for t in LessonType}:
            raise ValidationException(
                f"Unknown lesson type: {lesson_type}",
                details={"allowed": [t.value for t in LessonType]},
            )

    def _active_bookings_within(
        self, coach_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        """
        Active bookings of the coach that may intersect ``[start, end)``.

        Lessons are shorter than a day, so one that starts the day before
        ``start`` can still run past midnight into the interval.
        """
        return self.repository.get_active_bookings_for_coach_between(
            coach_id, start.date() - timedelta(days=1), end.date()
        )

    def _check_conflicts(self, coach: CoachProfile, start: datetime, end: datetime) -> None:
        existing = self._active_bookings_within(coach.id, start, end)
        for booking in existing:
            if booking.overlaps(start, end):
                self.logger.info(
                    "Booking conflict detected",
                    extra={"coach_id": coach.id, "conflicting_booking_id": booking.id},
                )
                raise BookingConflictException(
                    details={
                        "conflicting_booking_id": booking.id,
                        "start_time": booking.start_time.isoformat(),
                        "end_time": booking.end_time.isoformat(),
                    }
                )

    def _require_participant(self, principal: AuthenticatedUser, booking: Booking) -> None:
        if principal.is_admin:
            return
        if principal.id in (booking.student.user_id, booking.coach.user_id):
            return
        raise ForbiddenException("You do not have permission to access this booking")
