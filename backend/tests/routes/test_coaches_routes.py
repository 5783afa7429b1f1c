"""API tests for /api/coaches."""

from datetime import date, time, timedelta

from app.core.enums import ApprovalStatus


def _register_payload(**overrides):
    payload = {
        "email": "riley@example.com",
        "password": "Sup3rSecret!",
        "name": "Riley Range",
        "bio": "Short game specialist",
        "location": "Scottsdale, AZ",
        "pricePerHour": 120,
        "yearsExperience": 8,
        "specialties": ["Chipping", "Bunker Play"],
        "tools": ["Foresight GCQuad"],
        "certifications": ["PGA Member"],
        "videos": [{"title": "Bunker basics", "videoUrl": "https://example.com/bunker"}],
    }
    payload.update(overrides)
    return payload


class TestDirectory:
    def test_list_shows_only_approved(self, client, coach_factory):
        approved = coach_factory(name="Approved Coach")
        coach_factory(name="Pending Coach", approval_status=ApprovalStatus.PENDING)

        response = client.get("/api/coaches")

        assert response.status_code == 200
        coaches = response.json()["coaches"]
        assert [c["id"] for c in coaches] == [approved.id]
        assert coaches[0]["pricePerHour"] == 80.0
        assert coaches[0]["specialties"] == ["Putting"]

    def test_search_filters_and_sorts(self, client, coach_factory):
        cheap = coach_factory(name="Cheap", price_per_hour="50.00", specialties=("Driving",))
        pricey = coach_factory(
            name="Pricey", price_per_hour="150.00", specialties=("Driving", "Putting")
        )
        coach_factory(name="Putter", price_per_hour="90.00", specialties=("Putting",))

        response = client.get(
            "/api/coaches/search", params={"specialties": "driving", "sort": "price_high"}
        )

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["coaches"]] == [pricey.id, cheap.id]

    def test_search_comma_separated_terms(self, client, coach_factory):
        driver = coach_factory(name="Driver", price_per_hour="60.00", specialties=("Driving",))
        putter = coach_factory(name="Putter", price_per_hour="70.00", specialties=("Putting",))
        coach_factory(name="Chipper", specialties=("Chipping",))

        response = client.get(
            "/api/coaches/search", params={"specialties": "Driving,Putting", "sort": "price_low"}
        )

        assert [c["id"] for c in response.json()["coaches"]] == [driver.id, putter.id]

    def test_search_rejects_unknown_sort(self, client):
        response = client.get("/api/coaches/search", params={"sort": "alphabetical"})

        assert response.status_code == 400

    def test_search_rejects_inverted_price_range(self, client):
        response = client.get("/api/coaches/search", params={"minPrice": 100, "maxPrice": 50})

        assert response.status_code == 400

    def test_detail_hides_pending_from_public(self, client, coach_factory, auth_headers):
        pending = coach_factory(approval_status=ApprovalStatus.PENDING)

        public = client.get(f"/api/coaches/{pending.id}")
        owner = client.get(f"/api/coaches/{pending.id}", headers=auth_headers(pending.user))

        assert public.status_code == 404
        assert owner.status_code == 200
        assert owner.json()["approvalStatus"] == "pending"


class TestRegistration:
    def test_register_creates_pending_coach(self, client):
        response = client.post("/api/coaches/register", json=_register_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["approvalStatus"] == "pending"
        assert body["pricePerHour"] == 120.0
        assert body["specialties"] == ["Chipping", "Bunker Play"]
        assert body["videos"][0]["title"] == "Bunker basics"

        listing = client.get("/api/coaches")
        assert listing.json()["coaches"] == []

    def test_duplicate_email(self, client, coach):
        response = client.post(
            "/api/coaches/register", json=_register_payload(email=coach.user.email)
        )

        assert response.status_code == 409

    def test_price_must_be_positive(self, client):
        response = client.post("/api/coaches/register", json=_register_payload(pricePerHour=0))

        assert response.status_code == 422

    def test_me_returns_own_profile(self, client, coach, auth_headers):
        response = client.get("/api/coaches/me", headers=auth_headers(coach.user))

        assert response.status_code == 200
        assert response.json()["id"] == coach.id


class TestProfileEdit:
    def test_put_me_updates_profile(self, client, coach, auth_headers):
        response = client.put(
            "/api/coaches/me",
            json={
                "bio": "Range sessions and course management",
                "pricePerHour": 135,
                "specialties": ["Course Management"],
                "certifications": ["PGA Class A"],
                "videos": [{"title": "Pre-shot routine", "videoUrl": "https://example.com/pre"}],
            },
            headers=auth_headers(coach.user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["bio"] == "Range sessions and course management"
        assert body["pricePerHour"] == 135.0
        assert body["specialties"] == ["Course Management"]
        assert body["certifications"] == ["PGA Class A"]
        assert body["tools"] == ["TrackMan"]
        assert body["videos"][0]["videoUrl"] == "https://example.com/pre"
        assert body["location"] == "Austin, TX"

    def test_put_me_rejects_invalid_price(self, client, coach, auth_headers):
        response = client.put(
            "/api/coaches/me", json={"pricePerHour": 0}, headers=auth_headers(coach.user)
        )

        assert response.status_code == 422

    def test_put_me_rejects_unknown_fields(self, client, coach, auth_headers):
        response = client.put(
            "/api/coaches/me",
            json={"approvalStatus": "approved"},
            headers=auth_headers(coach.user),
        )

        assert response.status_code == 422

    def test_put_me_without_profile(self, client, student, auth_headers):
        response = client.put(
            "/api/coaches/me", json={"bio": "Hello"}, headers=auth_headers(student.user)
        )

        assert response.status_code == 404

    def test_put_me_requires_auth(self, client):
        response = client.put("/api/coaches/me", json={"bio": "Hello"})

        assert response.status_code == 401

    def test_put_by_id_owner_only(self, client, coach, coach_factory, auth_headers):
        other = coach_factory(name="Other Coach")

        forbidden = client.put(
            f"/api/coaches/{coach.id}", json={"bio": "Hijacked"}, headers=auth_headers(other.user)
        )
        allowed = client.put(
            f"/api/coaches/{coach.id}",
            json={"location": "Tempe, AZ"},
            headers=auth_headers(coach.user),
        )

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["location"] == "Tempe, AZ"
        assert allowed.json()["bio"] == "PGA professional"


class TestAvailableTimes:
    def test_booked_slots_removed(self, client, coach, student, booking_factory):
        lesson_day = date.today() + timedelta(days=7)
        booking_factory(student, coach, booking_date=lesson_day, start_time=time(9, 0))

        response = client.get(
            f"/api/coaches/{coach.id}/available-times", params={"date": lesson_day.isoformat()}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["coachId"] == coach.id
        assert body["date"] == lesson_day.isoformat()
        assert "9:00 AM" not in body["times"]
        assert "11:00 AM" in body["times"]

    def test_unknown_coach(self, client):
        response = client.get(
            "/api/coaches/01HZZZZZZZZZZZZZZZZZZZZZZZ/available-times",
            params={"date": (date.today() + timedelta(days=1)).isoformat()},
        )

        assert response.status_code == 404
