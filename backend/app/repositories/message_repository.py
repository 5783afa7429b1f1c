# backend/app/repositories/message_repository.py
"""
Message Repository for the chat system.

Messages are append-only; the only mutation is flipping ``is_read``.
"""

from datetime import datetime, timezone
import logging
from typing import Dict, List, Optional, Sequence, cast

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.conversation import Conversation
from ..models.message import Message
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """
    Repository for message data access.

    Handles message inserts, conversation transcripts and read tracking.
    """

    def __init__(self, db: Session):
        super().__init__(db, Message)
        self.logger = logging.getLogger(__name__)

    def create_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        """Append a message to a conversation (flush only)."""
        return self.create(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )

    def find_by_conversation(self, conversation_id: str) -> List[Message]:
        """
        Full transcript of a conversation.

        Ordered by created_at ascending, ties broken by id.
        """
        try:
            return cast(
                List[Message],
                (
                    self.db.query(Message)
                    .filter(Message.conversation_id == conversation_id)
                    .order_by(Message.created_at.asc(), Message.id.asc())
                    .all()
                ),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching messages for conversation: {str(e)}")
            raise RepositoryException(f"Failed to fetch messages: {str(e)}")

    def mark_conversation_read(self, conversation_id: str, reader_id: str) -> int:
        """
        Mark every unread message not sent by ``reader_id`` as read.

        Returns:
            Number of rows changed (0 when already read)
        """
        try:
            result = self.db.execute(
                update(Message)
                .where(
                    and_(
                        Message.conversation_id == conversation_id,
                        Message.sender_id != reader_id,
                        Message.is_read.is_(False),
                    )
                )
                .values(is_read=True, read_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session="fetch")
            )
            self.db.flush()
            return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking messages as read: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to mark messages as read: {str(e)}")

    def get_unread_count_for_user(self, user_id: str) -> int:
        """Unread messages addressed to ``user_id`` across all their conversations."""
        try:
            count = (
                self.db.query(func.count(Message.id))
                .join(Conversation, Conversation.id == Message.conversation_id)
                .filter(
                    or_(Conversation.coach_id == user_id, Conversation.student_id == user_id),
                    Message.sender_id != user_id,
                    Message.is_read.is_(False),
                )
                .scalar()
            )
            return int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting unread messages: {str(e)}")
            raise RepositoryException(f"Failed to count unread messages: {str(e)}")

    def get_unread_counts_by_conversation(
        self, conversation_ids: Sequence[str], user_id: str
    ) -> Dict[str, int]:
        if not conversation_ids:
            return {}
        try:
            rows = self.db.execute(
                select(Message.conversation_id, func.count(Message.id))
                .where(
                    Message.conversation_id.in_(list(conversation_ids)),
                    Message.sender_id != user_id,
                    Message.is_read.is_(False),
                )
                .group_by(Message.conversation_id)
            )
            return {conversation_id: int(count) for conversation_id, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting unread messages by conversation: {str(e)}")
            raise RepositoryException(f"Failed to count unread messages: {str(e)}")

    def get_latest_by_conversation(self, conversation_ids: Sequence[str]) -> Dict[str, Message]:
        """Most recent message of each conversation, keyed by conversation id."""
        if not conversation_ids:
            return {}
        try:
            ranked = (
                select(
                    Message.id.label("message_id"),
                    func.row_number()
                    .over(
                        partition_by=Message.conversation_id,
                        order_by=(Message.created_at.desc(), Message.id.desc()),
                    )
                    .label("rn"),
                )
                .where(Message.conversation_id.in_(list(conversation_ids)))
                .subquery()
            )
            messages = (
                self.db.query(Message)
                .join(ranked, ranked.c.message_id == Message.id)
                .filter(ranked.c.rn == 1)
                .all()
            )
            return {str(message.conversation_id): message for message in messages}
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching latest messages: {str(e)}")
            raise RepositoryException(f"Failed to fetch latest messages: {str(e)}")

    def get_latest_for_conversation(self, conversation_id: str) -> Optional[Message]:
        return self.get_latest_by_conversation([conversation_id]).get(conversation_id)
