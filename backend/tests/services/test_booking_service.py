"""Tests for BookingService: creation, overlap policy and the status lifecycle."""

from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from app.core.config import settings
from app.core.enums import ApprovalStatus, RoleName
from app.core.exceptions import (
    BookingConflictException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from app.models.booking import BookingStatus
from app.services.booking_service import BookingService, compute_total_amount, parse_lesson_time


@pytest.fixture
def service(db):
    return BookingService(db)


@pytest.fixture
def lesson_day():
    return date.today() + timedelta(days=7)


class TestParseLessonTime:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("09:00", time(9, 0)),
            ("14:30", time(14, 30)),
            ("14:30:15", time(14, 30, 15)),
            ("2:30 PM", time(14, 30)),
            ("9:00 am", time(9, 0)),
            ("12:00 AM", time(0, 0)),
            ("12:15 PM", time(12, 15)),
        ],
    )
    def test_accepted_formats(self, value, expected):
        assert parse_lesson_time(value) == expected

    @pytest.mark.parametrize("value", ["", "25:00", "9", "13:00 PM", "noon", "10:60"])
    def test_rejected_formats(self, value):
        with pytest.raises(ValidationException):
            parse_lesson_time(value)


class TestComputeTotalAmount:
    @pytest.mark.parametrize(
        "price,duration,expected",
        [
            ("80.00", 30, "40.00"),
            ("80.00", 60, "80.00"),
            ("80.00", 90, "120.00"),
            ("45.50", 90, "68.25"),
            ("55.55", 30, "27.78"),
        ],
    )
    def test_price_times_duration(self, price, duration, expected):
        assert compute_total_amount(Decimal(price), duration) == Decimal(expected)


class TestCreateBooking:
    def test_creates_pending_booking_with_total(
        self, service, coach, student, principal_for, lesson_day
    ):
        booking = service.create_booking(
            principal_for(student.user),
            coach_id=coach.id,
            booking_date=lesson_day,
            start_time="10:00 AM",
            duration_minutes=60,
        )

        assert booking.status == BookingStatus.PENDING.value
        assert booking.total_amount == Decimal("80.00")
        assert booking.start_time == time(10, 0)
        assert booking.student_id == student.id
        assert booking.coach_id == coach.id
        assert booking.lesson_type == "individual"

    def test_only_students_may_book(self, service, coach, principal_for, lesson_day):
        with pytest.raises(ForbiddenException):
            service.create_booking(
                principal_for(coach.user),
                coach_id=coach.id,
                booking_date=lesson_day,
                start_time="10:00",
                duration_minutes=60,
            )

    def test_student_role_without_profile_forbidden(
        self, service, coach, user_factory, principal_for, lesson_day
    ):
        bare = user_factory(RoleName.STUDENT)

        with pytest.raises(ForbiddenException):
            service.create_booking(
                principal_for(bare),
                coach_id=coach.id,
                booking_date=lesson_day,
                start_time="10:00",
                duration_minutes=60,
            )

    def test_past_date_rejected(self, service, coach, student, principal_for):
        with pytest.raises(ValidationException):
            service.create_booking(
                principal_for(student.user),
                coach_id=coach.id,
                booking_date=date.today() - timedelta(days=1),
                start_time="10:00",
                duration_minutes=60,
            )

    @pytest.mark.parametrize("duration", [0, 45, 180])
    def test_duration_must_be_allowed(
        self, service, coach, student, principal_for, lesson_day, duration
    ):
        with pytest.raises(ValidationException):
            service.create_booking(
                principal_for(student.user),
                coach_id=coach.id,
                booking_date=lesson_day,
                start_time="10:00",
                duration_minutes=duration,
            )

    def test_unknown_lesson_type(self, service, coach, student, principal_for, lesson_day):
        with pytest.raises(ValidationException):
            service.create_booking(
                principal_for(student.user),
                coach_id=coach.id,
                booking_date=lesson_day,
                start_time="10:00",
                duration_minutes=60,
                lesson_type="clinic",
            )

    def test_unparseable_time(self, service, coach, student, principal_for, lesson_day):
        with pytest.raises(ValidationException):
            service.create_booking(
                principal_for(student.user),
                coach_id=coach.id,
                booking_date=lesson_day,
                start_time="tomorrow-ish",
                duration_minutes=60,
            )

    def test_unapproved_coach_not_found(
        self, service, coach_factory, student, principal_for, lesson_day
    ):
        pending = coach_factory(approval_status=ApprovalStatus.PENDING)

        with pytest.raises(NotFoundException):
            service.create_booking(
                principal_for(student.user),
                coach_id=pending.id,
                booking_date=lesson_day,
                start_time="10:00",
                duration_minutes=60,
            )


class TestOverlapPolicy:
    def _book(self, service, principal, coach, day, start, duration=60):
        return service.create_booking(
            principal,
            coach_id=coach.id,
            booking_date=day,
            start_time=start,
            duration_minutes=duration,
        )

    def test_overlap_with_active_booking_conflicts(
        self, service, coach, student_factory, principal_for, lesson_day
    ):
        first = student_factory(name="First")
        second = student_factory(name="Second")
        self._book(service, principal_for(first.user), coach, lesson_day, "10:00", 90)

        with pytest.raises(BookingConflictException) as exc_info:
            self._book(service, principal_for(second.user), coach, lesson_day, "11:00")

        assert exc_info.value.status_code == 409

    def test_lesson_running_past_midnight_conflicts_with_next_day(
        self, service, coach, student_factory, principal_for, lesson_day
    ):
        late = student_factory(name="Night Owl")
        early = student_factory(name="Early Bird")
        self._book(service, principal_for(late.user), coach, lesson_day, "23:30", 90)

        with pytest.raises(BookingConflictException):
            self._book(
                service, principal_for(early.user), coach, lesson_day + timedelta(days=1), "0:00"
            )

        booking = self._book(
            service, principal_for(early.user), coach, lesson_day + timedelta(days=1), "1:00"
        )
        assert booking.start_time == time(1, 0)

    def test_adjacent_lessons_allowed(self, service, coach, student, principal_for, lesson_day):
        caller = principal_for(student.user)
        self._book(service, caller, coach, lesson_day, "10:00")

        booking = self._book(service, caller, coach, lesson_day, "11:00")

        assert booking.start_time == time(11, 0)

    def test_cancelled_booking_frees_the_slot(
        self, service, coach, student, principal_for, lesson_day
    ):
        caller = principal_for(student.user)
        first = self._book(service, caller, coach, lesson_day, "10:00")
        service.update_booking_status(caller, first.id, "cancelled")

        again = self._book(service, caller, coach, lesson_day, "10:00")

        assert again.status == BookingStatus.PENDING.value

    def test_other_coaches_do_not_conflict(
        self, service, coach_factory, student, principal_for, lesson_day
    ):
        caller = principal_for(student.user)
        self._book(service, caller, coach_factory(name="A"), lesson_day, "10:00")

        booking = self._book(service, caller, coach_factory(name="B"), lesson_day, "10:00")

        assert booking.id

    def test_overlap_check_can_be_disabled(
        self, monkeypatch, service, coach, student, principal_for, lesson_day
    ):
        monkeypatch.setattr(settings, "booking_prevent_overlap", False)
        caller = principal_for(student.user)
        self._book(service, caller, coach, lesson_day, "10:00")

        booking = self._book(service, caller, coach, lesson_day, "10:30")

        assert booking.start_time == time(10, 30)


class TestStatusTransitions:
    def test_coach_confirms_pending(self, service, coach, student, booking_factory, principal_for):
        booking = booking_factory(student, coach)

        updated = service.update_booking_status(principal_for(coach.user), booking.id, "confirmed")

        assert updated.status == BookingStatus.CONFIRMED.value
        assert updated.confirmed_at is not None

    def test_student_cannot_confirm(self, service, coach, student, booking_factory, principal_for):
        booking = booking_factory(student, coach)

        with pytest.raises(ForbiddenException) as exc_info:
            service.update_booking_status(principal_for(student.user), booking.id, "confirmed")

        assert exc_info.value.details == {"allowed": ["cancelled"]}

    def test_pending_to_completed_is_invalid(
        self, service, coach, student, booking_factory, principal_for
    ):
        booking = booking_factory(student, coach)

        with pytest.raises(InvalidTransitionException):
            service.update_booking_status(principal_for(coach.user), booking.id, "completed")

    def test_terminal_states_are_final(
        self, service, coach, student, booking_factory, principal_for
    ):
        cancelled = booking_factory(student, coach, status=BookingStatus.CANCELLED)

        with pytest.raises(InvalidTransitionException):
            service.update_booking_status(principal_for(coach.user), cancelled.id, "confirmed")

    def test_other_coach_forbidden(
        self, service, coach_factory, student, booking_factory, principal_for
    ):
        owner = coach_factory(name="Owner")
        intruder = coach_factory(name="Intruder")
        booking = booking_factory(student, owner)

        with pytest.raises(ForbiddenException):
            service.update_booking_status(principal_for(intruder.user), booking.id, "confirmed")

    def test_either_party_may_cancel_confirmed(
        self, service, coach, student, booking_factory, principal_for
    ):
        booking = booking_factory(student, coach, status=BookingStatus.CONFIRMED)

        updated = service.update_booking_status(principal_for(student.user), booking.id, "cancelled")

        assert updated.status == BookingStatus.CANCELLED.value
        assert updated.cancelled_at is not None
        assert updated.cancelled_by_id == student.user_id

    def test_complete_after_lesson_started(
        self, service, coach, student, booking_factory, principal_for
    ):
        booking = booking_factory(
            student,
            coach,
            booking_date=date.today() - timedelta(days=2),
            status=BookingStatus.CONFIRMED,
        )

        updated = service.update_booking_status(principal_for(coach.user), booking.id, "completed")

        assert updated.status == BookingStatus.COMPLETED.value
        assert updated.completed_at is not None

    def test_complete_before_lesson_rejected(
        self, service, coach, student, booking_factory, principal_for
    ):
        booking = booking_factory(student, coach, status=BookingStatus.CONFIRMED)

        with pytest.raises(ValidationException):
            service.update_booking_status(principal_for(coach.user), booking.id, "completed")

    def test_admin_may_confirm(
        self, service, coach, student, booking_factory, user_factory, principal_for
    ):
        booking = booking_factory(student, coach)
        admin = user_factory(RoleName.ADMIN)

        updated = service.update_booking_status(principal_for(admin), booking.id, "confirmed")

        assert updated.status == BookingStatus.CONFIRMED.value

    def test_unknown_status_rejected(
        self, service, coach, student, booking_factory, principal_for
    ):
        booking = booking_factory(student, coach)

        with pytest.raises(ValidationException):
            service.update_booking_status(principal_for(coach.user), booking.id, "done")

    def test_unknown_booking(self, service, coach, principal_for):
        with pytest.raises(NotFoundException):
            service.update_booking_status(principal_for(coach.user), "missing", "confirmed")


class TestListingAndAvailability:
    def test_list_for_each_participant(
        self, service, coach_factory, student_factory, booking_factory, user_factory, principal_for
    ):
        coach = coach_factory()
        student = student_factory()
        other = student_factory(name="Other")
        mine = booking_factory(student, coach)
        booking_factory(other, coach_factory(name="Elsewhere"))
        admin = user_factory(RoleName.ADMIN)

        assert [b.id for b in service.list_bookings_for_user(principal_for(student.user))] == [
            mine.id
        ]
        assert [b.id for b in service.list_bookings_for_user(principal_for(coach.user))] == [
            mine.id
        ]
        assert service.list_bookings_for_user(principal_for(admin)) == []

    def test_get_booking_participants_only(
        self, service, coach, student, student_factory, booking_factory, principal_for
    ):
        booking = booking_factory(student, coach)
        outsider = student_factory(name="Outsider")

        assert service.get_booking(principal_for(coach.user), booking.id).id == booking.id
        with pytest.raises(ForbiddenException):
            service.get_booking(principal_for(outsider.user), booking.id)

    def test_available_times_skip_booked_slots(
        self, service, coach, student, booking_factory, lesson_day
    ):
        booking_factory(student, coach, booking_date=lesson_day, start_time=time(10, 0))
        booking_factory(
            student,
            coach,
            booking_date=lesson_day,
            start_time=time(13, 30),
            status=BookingStatus.CANCELLED,
        )
        booking_factory(
            student, coach, booking_date=lesson_day, start_time=time(14, 30), duration_minutes=30
        )

        times = service.get_available_times(coach.id, lesson_day)

        assert times == ["9:00 AM", "11:00 AM", "1:00 PM", "3:00 PM", "4:00 PM"]

    def test_available_times_include_lessons_from_the_previous_day(
        self, service, coach, student, booking_factory, lesson_day
    ):
        booking_factory(
            student,
            coach,
            booking_date=lesson_day - timedelta(days=1),
            start_time=time(20, 0),
            duration_minutes=14 * 60,
        )

        times = service.get_available_times(coach.id, lesson_day)

        assert "9:00 AM" not in times
        assert times[0] == "10:00 AM"

    def test_available_times_require_approved_coach(self, service, coach_factory, lesson_day):
        pending = coach_factory(approval_status=ApprovalStatus.PENDING)

        with pytest.raises(NotFoundException):
            service.get_available_times(pending.id, lesson_day)
