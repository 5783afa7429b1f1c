# backend/app/repositories/conversation_repository.py
"""
Conversation Repository for per-pair messaging.

Provides data access methods for conversations between coaches and students.
Conversation creation is an atomic insert-or-ignore keyed by the
(coach_id, student_id) unique constraint, so concurrent first contacts for
the same pair leave exactly one row.
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence, cast

from sqlalchemy import insert, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
import ulid

from ..core.exceptions import RepositoryException
from ..models.conversation import Conversation
from ..models.user import User
from .base_repository import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """
    Repository for Conversation entity operations.

    Handles:
    - Finding or creating the conversation for a coach-student pair
    - Listing conversations for a participant
    - Updating conversation metadata (last_message_at)
    """

    def __init__(self, db: Session):
        super().__init__(db, Conversation)

    def find_by_pair(self, coach_id: str, student_id: str) -> Optional[Conversation]:
        """
        Find the conversation between a coach and a student.

        Args:
            coach_id: The coach's user ID
            student_id: The student's user ID
        """
        try:
            result = self.db.execute(
                select(Conversation).where(
                    Conversation.coach_id == coach_id,
                    Conversation.student_id == student_id,
                )
            )
            return cast(Optional[Conversation], result.scalar_one_or_none())
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding conversation for pair: {str(e)}")
            raise RepositoryException(f"Failed to find conversation: {str(e)}")

    def get_or_create(self, coach_id: str, student_id: str) -> tuple[Conversation, bool]:
        """
        Get the pair's conversation, inserting it if missing.

        The insert is ``ON CONFLICT DO NOTHING`` on PostgreSQL and
        ``INSERT OR IGNORE`` on SQLite; the row is then re-selected. A
        concurrent insert for the same pair therefore never produces a
        duplicate or an integrity error.

        Returns:
            Tuple of (conversation, created) where created is True if new
        """
        conversation_id = str(ulid.ULID())
        values = {
            "id": conversation_id,
            "coach_id": coach_id,
            "student_id": student_id,
            "created_at": datetime.now(timezone.utc),
        }

        try:
            created = False
            if self.dialect_name == "postgresql":
                stmt = (
                    pg_insert(Conversation)
                    .values(**values)
                    .on_conflict_do_nothing(index_elements=["coach_id", "student_id"])
                    .returning(Conversation.id)
                )
                created = self.db.execute(stmt).scalar_one_or_none() is not None
            else:
                stmt = insert(Conversation).values(**values)
                if self.dialect_name == "sqlite":
                    stmt = stmt.prefix_with("OR IGNORE")
                result = self.db.execute(stmt)
                created = bool(getattr(result, "rowcount", 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating conversation for pair: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create conversation: {str(e)}")

        conversation = self.find_by_pair(coach_id, student_id)
        if conversation is None:
            raise RepositoryException("Conversation not found after insert")
        return conversation, created

    def find_for_user(self, user_id: str) -> List[Conversation]:
        """
        Find all conversations where a user is a participant.

        Ordered by last activity descending; conversations without messages
        come last (newest first among themselves).
        """
        try:
            query = (
                self.db.query(Conversation)
                .options(
                    joinedload(Conversation.coach).joinedload(User.coach_profile),
                    joinedload(Conversation.student).joinedload(User.student_profile),
                )
                .filter(
                    or_(
                        Conversation.coach_id == user_id,
                        Conversation.student_id == user_id,
                    )
                )
                .order_by(
                    Conversation.last_message_at.is_(None),
                    Conversation.last_message_at.desc(),
                    Conversation.created_at.desc(),
                )
            )
            return cast(List[Conversation], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing conversations for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list conversations: {str(e)}")

    def ids_for_user(self, user_id: str) -> Sequence[str]:
        try:
            rows = self.db.execute(
                select(Conversation.id).where(
                    or_(Conversation.coach_id == user_id, Conversation.student_id == user_id)
                )
            )
            return [row[0] for row in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing conversation ids for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list conversations: {str(e)}")

    def update_last_message_at(
        self, conversation_id: str, timestamp: Optional[datetime] = None
    ) -> Optional[Conversation]:
        conversation = self.get_by_id(conversation_id, load_relationships=False)
        if conversation:
            conversation.last_message_at = timestamp or datetime.now(timezone.utc)
            self.db.flush()
        return conversation
