# backend/app/services/conversation_service.py
"""
Conversation Service for per-pair messaging.

Handles business logic for the messaging store:
- Getting or creating the conversation for a coach-student pair
- Sending messages and reading transcripts (participants only)
- Inbox listing with last-message preview and unread counts
- Read tracking
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import (
    ERROR_CONVERSATION_NOT_FOUND,
    LAST_MESSAGE_PREVIEW_LENGTH,
    MAX_MESSAGE_LENGTH,
)
from ..core.enums import RoleName
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.conversation import Conversation
from ..models.message import Message
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import AuthenticatedUser
from ..repositories.conversation_repository import ConversationRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.message_repository import MessageRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class ConversationSummary:
    """Inbox row for one conversation."""

    id: str
    coach_id: str
    coach_name: str
    student_id: str
    student_name: str
    last_message: Optional[str]
    last_message_time: Optional[datetime]
    unread_count: int


class ConversationService(BaseService):
    """
    Service for managing coach-student conversations.

    Every operation takes the caller explicitly and checks participation
    before touching data. Admins may read any conversation.
    """

    def __init__(
        self,
        db: Session,
        conversation_repository: Optional[ConversationRepository] = None,
        message_repository: Optional[MessageRepository] = None,
    ):
        super().__init__(db)
        self.conversation_repository = (
            conversation_repository or RepositoryFactory.create_conversation_repository(db)
        )
        self.message_repository = message_repository or RepositoryFactory.create_message_repository(
            db
        )
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.student_repository = RepositoryFactory.create_student_repository(db)
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("get_or_create_conversation")
    def get_or_create_conversation(
        self,
        principal: AuthenticatedUser,
        coach_id: Optional[str],
        student_id: Optional[str] = None,
    ) -> Tuple[Conversation, bool]:
        """
        Get the conversation between a coach and a student, creating it if needed.

        Args:
            principal: The caller; must be the coach or the student
            coach_id: The coach's user ID (a coach profile ID is also accepted)
            student_id: The student's profile ID (a student user ID is also
                accepted). Defaults to the caller's own profile for students.

        Returns:
            Tuple of (conversation, created) where created is True if new

        Raises:
            ValidationException: If either id is missing
            NotFoundException: If an id does not resolve to a coach/student
            ForbiddenException: If the caller is not one of the two parties
        """
        if not student_id and principal.is_student:
            own_profile = self.student_repository.get_by_user_id(principal.id)
            student_id = own_profile.id if own_profile else None

        if not coach_id or not student_id:
            raise ValidationException("coachId and studentId are required")

        coach_user_id = self._resolve_coach_user_id(coach_id)
        student_user_id = self._resolve_student_user_id(student_id)

        if principal.id not in (coach_user_id, student_user_id):
            raise ForbiddenException("You can only open conversations you take part in")

        with self.transaction():
            conversation, created = self.conversation_repository.get_or_create(
                coach_id=coach_user_id,
                student_id=student_user_id,
            )

        if created:
            self.log_operation(
                "conversation_created",
                conversation_id=conversation.id,
                coach_id=coach_user_id,
                student_id=student_user_id,
            )
        return conversation, created

    @BaseService.measure_operation("send_message")
    def send_message(
        self,
        principal: AuthenticatedUser,
        conversation_id: str,
        content: Optional[str],
    ) -> Message:
        """
        Append a message to a conversation.

        Content is trimmed first. Nothing is written when validation or the
        participation check fails.
        """
        text = (content or "").strip()
        if not text:
            raise ValidationException("Message content cannot be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters",
                details={"max_length": MAX_MESSAGE_LENGTH},
            )

        conversation = self._get_conversation(conversation_id)
        if not conversation.is_participant(principal.id):
            raise ForbiddenException("You are not a participant in this conversation")

        with self.transaction():
            message = self.message_repository.create_message(
                conversation_id=conversation.id,
                sender_id=principal.id,
                content=text,
            )
            self.conversation_repository.update_last_message_at(
                conversation.id, timestamp=message.created_at
            )

        prometheus_metrics.inc_message_sent(principal.role.value)
        self.log_operation(
            "message_sent",
            conversation_id=conversation.id,
            message_id=message.id,
            sender_id=principal.id,
        )
        return message

    @BaseService.measure_operation("list_messages")
    def list_messages(self, principal: AuthenticatedUser, conversation_id: str) -> List[Message]:
        """All messages of a conversation in ascending creation order."""
        conversation = self._get_conversation(conversation_id)
        self._require_reader(principal, conversation)
        return self.message_repository.find_by_conversation(conversation.id)

    @BaseService.measure_operation("list_conversations")
    def list_conversations(self, principal: AuthenticatedUser) -> List[ConversationSummary]:
        """
        Inbox for the caller.

        Most recent activity first; conversations without messages last.
        """
        conversations = self.conversation_repository.find_for_user(principal.id)
        ids = [c.id for c in conversations]
        latest = self.message_repository.get_latest_by_conversation(ids)
        unread = self.message_repository.get_unread_counts_by_conversation(ids, principal.id)

        summaries = []
        for conversation in conversations:
            last = latest.get(conversation.id)
            summaries.append(
                ConversationSummary(
                    id=conversation.id,
                    coach_id=conversation.coach_id,
                    coach_name=self._display_name(conversation.coach),
                    student_id=conversation.student_id,
                    student_name=self._display_name(conversation.student),
                    last_message=last.content[:LAST_MESSAGE_PREVIEW_LENGTH] if last else None,
                    last_message_time=last.created_at if last else None,
                    unread_count=unread.get(conversation.id, 0),
                )
            )
        return summaries

    @BaseService.measure_operation("mark_read")
    def mark_read(self, principal: AuthenticatedUser, conversation_id: str) -> int:
        """
        Mark every message the caller did not send as read.

        Idempotent; returns the number of messages changed.
        """
        conversation = self._get_conversation(conversation_id)
        if not conversation.is_participant(principal.id):
            raise ForbiddenException("You are not a participant in this conversation")

        with self.transaction():
            updated = self.message_repository.mark_conversation_read(conversation.id, principal.id)

        if updated:
            self.log_operation(
                "messages_marked_read",
                conversation_id=conversation.id,
                reader_id=principal.id,
                count=updated,
            )
        return updated

    @BaseService.measure_operation("get_unread_count")
    def get_unread_count(self, principal: AuthenticatedUser) -> int:
        return self.message_repository.get_unread_count_for_user(principal.id)

    # Helpers

    def _get_conversation(self, conversation_id: str) -> Conversation:
        conversation = self.conversation_repository.get_by_id(
            conversation_id, load_relationships=False
        )
        if conversation is None:
            raise NotFoundException(ERROR_CONVERSATION_NOT_FOUND)
        return conversation

    def _require_reader(self, principal: AuthenticatedUser, conversation: Conversation) -> None:
        if conversation.is_participant(principal.id):
            return
        raise ForbiddenException("You are not a participant in this conversation")

    def _resolve_coach_user_id(self, coach_id: str) -> str:
        user = self.user_repository.get_by_id(coach_id, load_relationships=False)
        if user is not None and user.role == RoleName.COACH.value:
            return str(user.id)
        coach = self.coach_repository.get_by_id(coach_id, load_relationships=False)
        if coach is not None:
            return str(coach.user_id)
        raise NotFoundException("Coach not found", details={"coach_id": coach_id})

    def _resolve_student_user_id(self, student_id: str) -> str:
        student = self.student_repository.get_by_id(student_id, load_relationships=False)
        if student is not None:
            return str(student.user_id)
        user = self.user_repository.get_by_id(student_id, load_relationships=False)
        if user is not None and user.role == RoleName.STUDENT.value:
            return str(user.id)
        raise NotFoundException("Student not found", details={"student_id": student_id})

    @staticmethod
    def _display_name(user: Optional[User]) -> str:
        return user.display_name if user is not None else ""
