"""API tests for /api/bookings."""

from datetime import date, time, timedelta

from app.models.booking import BookingStatus


def _lesson_date() -> str:
    return (date.today() + timedelta(days=7)).isoformat()


def _booking_payload(coach, **overrides):
    payload = {
        "coachId": coach.id,
        "date": _lesson_date(),
        "time": "10:00",
        "duration": 60,
        "lessonType": "individual",
        "location": "Driving range",
    }
    payload.update(overrides)
    return payload


class TestCreateBooking:
    def test_student_books_a_lesson(self, client, coach, student, auth_headers):
        response = client.post(
            "/api/bookings", json=_booking_payload(coach), headers=auth_headers(student.user)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["totalAmount"] == 80.0
        assert body["time"] == "10:00"
        assert body["endTime"] == "11:00"
        assert body["coachName"] == coach.name
        assert body["studentName"] == student.name

    def test_twelve_hour_time_accepted(self, client, coach, student, auth_headers):
        response = client.post(
            "/api/bookings",
            json=_booking_payload(coach, time="2:30 PM", duration=90),
            headers=auth_headers(student.user),
        )

        assert response.status_code == 201
        assert response.json()["time"] == "14:30"
        assert response.json()["totalAmount"] == 120.0

    def test_overlap_conflicts(self, client, coach, student, booking_factory, auth_headers):
        booking_factory(student, coach, start_time=time(10, 0), duration_minutes=60)

        response = client.post(
            "/api/bookings",
            json=_booking_payload(coach, time="10:30"),
            headers=auth_headers(student.user),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "BOOKING_CONFLICT"

    def test_coach_cannot_book(self, client, coach, auth_headers):
        response = client.post(
            "/api/bookings", json=_booking_payload(coach), headers=auth_headers(coach.user)
        )

        assert response.status_code == 403

    def test_invalid_duration(self, client, coach, student, auth_headers):
        response = client.post(
            "/api/bookings",
            json=_booking_payload(coach, duration=45),
            headers=auth_headers(student.user),
        )

        assert response.status_code == 400

    def test_unknown_lesson_type_is_a_validation_error(self, client, coach, student, auth_headers):
        response = client.post(
            "/api/bookings",
            json=_booking_payload(coach, lessonType="clinic"),
            headers=auth_headers(student.user),
        )

        assert response.status_code == 422
        assert response.json()["errors"]


class TestBookingStatus:
    def test_coach_confirms(self, client, coach, student, booking_factory, auth_headers):
        booking = booking_factory(student, coach)

        response = client.patch(
            f"/api/bookings/{booking.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(coach.user),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert response.json()["confirmedAt"] is not None

    def test_student_cannot_confirm(self, client, coach, student, booking_factory, auth_headers):
        booking = booking_factory(student, coach)

        response = client.patch(
            f"/api/bookings/{booking.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 403
        assert response.json()["errors"] == {"allowed": ["cancelled"]}

    def test_terminal_status_conflicts(self, client, coach, student, booking_factory, auth_headers):
        booking = booking_factory(
            student,
            coach,
            booking_date=date.today() - timedelta(days=3),
            status=BookingStatus.COMPLETED,
        )

        response = client.patch(
            f"/api/bookings/{booking.id}/status",
            json={"status": "cancelled"},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    def test_unknown_status(self, client, coach, student, booking_factory, auth_headers):
        booking = booking_factory(student, coach)

        response = client.patch(
            f"/api/bookings/{booking.id}/status",
            json={"status": "rescheduled"},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 400


class TestReadingBookings:
    def test_my_bookings_per_role(
        self, client, coach, student, student_factory, booking_factory, auth_headers
    ):
        other = student_factory(name="Other Student")
        mine = booking_factory(student, coach)
        booking_factory(other, coach, start_time=time(14, 0))

        as_student = client.get("/api/bookings/my-bookings", headers=auth_headers(student.user))
        as_coach = client.get("/api/bookings/my-bookings", headers=auth_headers(coach.user))

        assert [b["id"] for b in as_student.json()["bookings"]] == [mine.id]
        assert len(as_coach.json()["bookings"]) == 2

    def test_outsider_cannot_read_booking(
        self, client, coach, student, student_factory, booking_factory, auth_headers
    ):
        booking = booking_factory(student, coach)
        outsider = student_factory(name="Outsider")

        response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers(outsider.user))

        assert response.status_code == 403

    def test_admin_can_read_any_booking(
        self, client, coach, student, admin_user, booking_factory, auth_headers
    ):
        booking = booking_factory(student, coach)

        response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers(admin_user))

        assert response.status_code == 200
        assert response.json()["id"] == booking.id
