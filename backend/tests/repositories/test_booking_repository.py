"""Tests for BookingRepository."""

from datetime import date, time, timedelta

from app.models.booking import BookingStatus
from app.repositories.booking_repository import BookingRepository


class TestBookingRepository:
    def test_active_bookings_only_pending_and_confirmed(self, db, coach, student, booking_factory):
        day = date.today() + timedelta(days=5)
        pending = booking_factory(student, coach, booking_date=day, start_time=time(9, 0))
        confirmed = booking_factory(
            student, coach, booking_date=day, start_time=time(11, 0), status=BookingStatus.CONFIRMED
        )
        booking_factory(
            student, coach, booking_date=day, start_time=time(13, 0), status=BookingStatus.CANCELLED
        )
        booking_factory(student, coach, booking_date=day + timedelta(days=1))

        active = BookingRepository(db).get_active_bookings_for_coach_between(coach.id, day, day)

        assert [b.id for b in active] == [pending.id, confirmed.id]

    def test_active_bookings_across_a_date_range(self, db, coach, student, booking_factory):
        day = date.today() + timedelta(days=5)
        late = booking_factory(student, coach, booking_date=day, start_time=time(23, 0))
        next_morning = booking_factory(
            student, coach, booking_date=day + timedelta(days=1), start_time=time(8, 0)
        )
        booking_factory(student, coach, booking_date=day + timedelta(days=2))

        active = BookingRepository(db).get_active_bookings_for_coach_between(
            coach.id, day, day + timedelta(days=1)
        )

        assert [b.id for b in active] == [late.id, next_morning.id]

    def test_participant_listing_newest_first(
        self, db, coach_factory, student_factory, booking_factory
    ):
        coach = coach_factory()
        other_coach = coach_factory(name="Other Coach")
        student = student_factory()
        other_student = student_factory(name="Other Student")
        today = date.today()
        early = booking_factory(student, coach, booking_date=today + timedelta(days=1))
        late = booking_factory(student, other_coach, booking_date=today + timedelta(days=9))
        same_day_later = booking_factory(
            student, coach, booking_date=today + timedelta(days=9), start_time=time(15, 0)
        )
        booking_factory(other_student, other_coach)

        repo = BookingRepository(db)
        as_student = repo.get_bookings_for_participant(student_profile_id=student.id)
        as_coach = repo.get_bookings_for_participant(coach_profile_id=coach.id)

        assert [b.id for b in as_student] == [same_day_later.id, late.id, early.id]
        assert {b.id for b in as_coach} == {early.id, same_day_later.id}
        assert repo.get_bookings_for_participant() == []

    def test_get_all_bookings_filters_status(self, db, coach, student, booking_factory):
        booking_factory(student, coach, status=BookingStatus.PENDING)
        done = booking_factory(student, coach, status=BookingStatus.COMPLETED)

        repo = BookingRepository(db)

        assert len(repo.get_all_bookings()) == 2
        assert [b.id for b in repo.get_all_bookings(BookingStatus.COMPLETED.value)] == [done.id]
