"""Tests for ConversationService: pair conversations, messaging and read tracking."""

import pytest

from app.core.enums import RoleName
from app.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from app.models.message import Message
from app.services.conversation_service import ConversationService


@pytest.fixture
def service(db):
    return ConversationService(db)


@pytest.fixture
def conversation(service, coach, student, principal_for):
    conversation, _ = service.get_or_create_conversation(
        principal_for(student.user), coach.user_id, student.id
    )
    return conversation


class TestGetOrCreateConversation:
    def test_idempotent_for_the_same_pair(self, service, coach, student, principal_for):
        caller = principal_for(student.user)

        first, created = service.get_or_create_conversation(caller, coach.user_id, student.id)
        second, created_again = service.get_or_create_conversation(
            caller, coach.user_id, student.id
        )

        assert created is True
        assert created_again is False
        assert first.id == second.id
        assert first.coach_id == coach.user_id
        assert first.student_id == student.user_id

    def test_student_defaults_to_own_profile(self, service, coach, student, principal_for):
        conversation, _ = service.get_or_create_conversation(
            principal_for(student.user), coach.user_id
        )

        assert conversation.student_id == student.user_id

    def test_coach_profile_id_is_accepted(self, service, coach, student, principal_for):
        conversation, _ = service.get_or_create_conversation(
            principal_for(coach.user), coach.id, student.id
        )

        assert conversation.coach_id == coach.user_id

    def test_missing_ids_rejected(self, service, coach, principal_for):
        with pytest.raises(ValidationException):
            service.get_or_create_conversation(principal_for(coach.user), coach.user_id, None)

    def test_unknown_student_not_found(self, service, coach, principal_for):
        with pytest.raises(NotFoundException):
            service.get_or_create_conversation(
                principal_for(coach.user), coach.user_id, "01HZZZZZZZZZZZZZZZZZZZZZZZ"
            )

    def test_non_coach_user_is_not_a_coach(self, service, student_factory, principal_for):
        student = student_factory()
        other = student_factory(name="Not A Coach")

        with pytest.raises(NotFoundException):
            service.get_or_create_conversation(
                principal_for(student.user), other.user_id, student.id
            )

    def test_third_party_forbidden(self, service, coach, student, student_factory, principal_for):
        outsider = student_factory(name="Outsider")

        with pytest.raises(ForbiddenException):
            service.get_or_create_conversation(
                principal_for(outsider.user), coach.user_id, student.id
            )

    def test_admin_outside_the_pair_forbidden(
        self, service, coach, student, user_factory, principal_for
    ):
        admin = user_factory(RoleName.ADMIN)

        with pytest.raises(ForbiddenException):
            service.get_or_create_conversation(principal_for(admin), coach.user_id, student.id)


class TestSendMessage:
    def test_send_trims_and_bumps_last_message_at(
        self, service, conversation, student, principal_for
    ):
        message = service.send_message(principal_for(student.user), conversation.id, "  Hi coach!  ")

        assert message.content == "Hi coach!"
        assert message.sender_id == student.user_id
        assert message.is_read is False
        assert conversation.last_message_at is not None

    def test_whitespace_only_rejected_without_insert(
        self, db, service, conversation, student, principal_for
    ):
        with pytest.raises(ValidationException):
            service.send_message(principal_for(student.user), conversation.id, "   \n\t ")

        assert db.query(Message).count() == 0

    def test_too_long_rejected(self, db, service, conversation, student, principal_for):
        with pytest.raises(ValidationException):
            service.send_message(principal_for(student.user), conversation.id, "x" * 2001)

        assert db.query(Message).count() == 0

    def test_exactly_max_length_allowed(self, service, conversation, student, principal_for):
        message = service.send_message(principal_for(student.user), conversation.id, "x" * 2000)

        assert len(message.content) == 2000

    def test_non_participant_forbidden(
        self, db, service, conversation, student_factory, principal_for
    ):
        outsider = student_factory(name="Outsider")

        with pytest.raises(ForbiddenException):
            service.send_message(principal_for(outsider.user), conversation.id, "hello")

        assert db.query(Message).count() == 0

    def test_unknown_conversation(self, service, student, principal_for):
        with pytest.raises(NotFoundException):
            service.send_message(principal_for(student.user), "missing", "hello")


class TestListMessages:
    def test_ascending_order(self, service, conversation, coach, student, principal_for):
        for i in range(4):
            sender = student.user if i % 2 == 0 else coach.user
            service.send_message(principal_for(sender), conversation.id, f"message {i}")

        messages = service.list_messages(principal_for(coach.user), conversation.id)

        assert [m.content for m in messages] == [f"message {i}" for i in range(4)]
        timestamps = [m.created_at for m in messages]
        assert all(a <= b for a, b in zip(timestamps, timestamps[1:]))

    def test_non_participant_forbidden(
        self, service, conversation, coach_factory, principal_for
    ):
        other_coach = coach_factory(name="Other Coach")

        with pytest.raises(ForbiddenException):
            service.list_messages(principal_for(other_coach.user), conversation.id)

    def test_admin_outside_the_pair_cannot_read(
        self, service, conversation, student, user_factory, principal_for
    ):
        service.send_message(principal_for(student.user), conversation.id, "hello")
        admin = user_factory(RoleName.ADMIN)

        with pytest.raises(ForbiddenException):
            service.list_messages(principal_for(admin), conversation.id)


class TestInboxAndReadTracking:
    def test_list_conversations_summary(
        self, service, conversation, coach, student, principal_for
    ):
        service.send_message(principal_for(coach.user), conversation.id, "Welcome aboard")
        service.send_message(principal_for(coach.user), conversation.id, "See you Tuesday")

        summaries = service.list_conversations(principal_for(student.user))

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.id == conversation.id
        assert summary.coach_name == coach.name
        assert summary.student_name == student.name
        assert summary.last_message == "See you Tuesday"
        assert summary.last_message_time is not None
        assert summary.unread_count == 2

    def test_conversations_without_messages_last(
        self, service, coach_factory, student, principal_for
    ):
        caller = principal_for(student.user)
        silent_coach = coach_factory(name="Silent")
        chatty_coach = coach_factory(name="Chatty")
        silent, _ = service.get_or_create_conversation(caller, silent_coach.user_id)
        chatty, _ = service.get_or_create_conversation(caller, chatty_coach.user_id)
        service.send_message(caller, chatty.id, "Are you free Saturday?")

        ids = [s.id for s in service.list_conversations(caller)]

        assert ids == [chatty.id, silent.id]

    def test_mark_read_is_idempotent(self, service, conversation, coach, student, principal_for):
        service.send_message(principal_for(coach.user), conversation.id, "one")
        service.send_message(principal_for(coach.user), conversation.id, "two")
        service.send_message(principal_for(student.user), conversation.id, "mine")
        reader = principal_for(student.user)

        assert service.get_unread_count(reader) == 2
        assert service.mark_read(reader, conversation.id) == 2
        assert service.mark_read(reader, conversation.id) == 0
        assert service.get_unread_count(reader) == 0
        assert service.get_unread_count(principal_for(coach.user)) == 1

        by_content = {m.content: m for m in service.list_messages(reader, conversation.id)}
        assert by_content["one"].is_read is True
        assert by_content["mine"].is_read is False

    def test_mark_read_requires_participant(
        self, service, conversation, student_factory, principal_for
    ):
        outsider = student_factory(name="Outsider")

        with pytest.raises(ForbiddenException):
            service.mark_read(principal_for(outsider.user), conversation.id)
