"""API tests for /api/messages."""

import pytest

from app.core.constants import MAX_MESSAGE_LENGTH


@pytest.fixture
def conversation_id(client, coach, student, auth_headers):
    response = client.post(
        "/api/messages/conversation",
        json={"coachId": coach.user_id, "studentId": student.id},
        headers=auth_headers(student.user),
    )
    return response.json()["id"]


class TestConversationEndpoint:
    def test_requires_authentication(self, client, coach, student):
        response = client.post(
            "/api/messages/conversation",
            json={"coachId": coach.user_id, "studentId": student.id},
        )

        assert response.status_code == 401
        assert response.json()["status"] == 401

    def test_created_then_existing(self, client, coach, student, auth_headers):
        headers = auth_headers(student.user)
        payload = {"coachId": coach.user_id, "studentId": student.id}

        first = client.post("/api/messages/conversation", json=payload, headers=headers)
        second = client.post("/api/messages/conversation", json=payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 200
        body = first.json()
        assert body["id"] == second.json()["id"]
        assert body["coachId"] == coach.user_id
        assert body["studentId"] == student.user_id
        assert body["lastMessageAt"] is None

    def test_outsider_forbidden(self, client, coach, student, student_factory, auth_headers):
        outsider = student_factory(name="Outsider")

        response = client.post(
            "/api/messages/conversation",
            json={"coachId": coach.user_id, "studentId": student.id},
            headers=auth_headers(outsider.user),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "ForbiddenException"

    def test_unknown_fields_rejected(self, client, coach, student, auth_headers):
        response = client.post(
            "/api/messages/conversation",
            json={"coachId": coach.user_id, "studentId": student.id, "bookingId": "x"},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestMessaging:
    def test_send_and_read_transcript(self, client, coach, student, conversation_id, auth_headers):
        sent = client.post(
            "/api/messages/message",
            json={"conversationId": conversation_id, "content": "  Can we work on putting?  "},
            headers=auth_headers(student.user),
        )

        assert sent.status_code == 201
        assert sent.json()["content"] == "Can we work on putting?"
        assert sent.json()["isRead"] is False

        transcript = client.get(
            f"/api/messages/messages/{conversation_id}", headers=auth_headers(coach.user)
        )
        assert transcript.status_code == 200
        assert [m["content"] for m in transcript.json()] == ["Can we work on putting?"]

    def test_blank_message_rejected(self, client, student, conversation_id, auth_headers):
        response = client.post(
            "/api/messages/message",
            json={"conversationId": conversation_id, "content": "   "},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ValidationException"

    def test_too_long_message_rejected(self, client, student, conversation_id, auth_headers):
        response = client.post(
            "/api/messages/message",
            json={"conversationId": conversation_id, "content": "x" * (MAX_MESSAGE_LENGTH + 1)},
            headers=auth_headers(student.user),
        )

        assert response.status_code == 400

    def test_unknown_conversation(self, client, student, auth_headers):
        response = client.get(
            "/api/messages/messages/01HZZZZZZZZZZZZZZZZZZZZZZZ", headers=auth_headers(student.user)
        )

        assert response.status_code == 404


class TestInboxAndUnread:
    def test_inbox_unread_and_mark_read(
        self, client, coach, student, conversation_id, auth_headers
    ):
        for text in ("First", "Second"):
            client.post(
                "/api/messages/message",
                json={"conversationId": conversation_id, "content": text},
                headers=auth_headers(student.user),
            )

        inbox = client.get("/api/messages/conversations", headers=auth_headers(coach.user))
        assert inbox.status_code == 200
        rows = inbox.json()["conversations"]
        assert len(rows) == 1
        assert rows[0]["lastMessage"] == "Second"
        assert rows[0]["unreadCount"] == 2
        assert rows[0]["studentName"] == student.name
        assert rows[0]["coachName"] == coach.name

        unread = client.get("/api/messages/unread-count", headers=auth_headers(coach.user))
        assert unread.json() == {"count": 2}

        marked = client.post(
            f"/api/messages/mark-read/{conversation_id}", headers=auth_headers(coach.user)
        )
        assert marked.json() == {"updated": 2}

        unread = client.get("/api/messages/unread-count", headers=auth_headers(coach.user))
        assert unread.json() == {"count": 0}

    def test_sender_has_nothing_unread(self, client, student, conversation_id, auth_headers):
        client.post(
            "/api/messages/message",
            json={"conversationId": conversation_id, "content": "Hello"},
            headers=auth_headers(student.user),
        )

        response = client.get("/api/messages/unread-count", headers=auth_headers(student.user))

        assert response.json()["count"] == 0
