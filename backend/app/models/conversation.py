# backend/app/models/conversation.py
"""
Conversation model for per-pair messaging.

Each coach-student pair has exactly one conversation, independent of how
many bookings they share. Messaging before any booking is allowed.

Design decisions:
- One conversation per coach-student pair, enforced by a unique constraint
- Both participants are referenced by their ``users.id``
- ``last_message_at`` is bumped on every message to order the inbox
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Conversation(Base):
    """
    Single communication channel between a coach and a student.

    Attributes:
        id: ULID primary key
        coach_id: Coach participant (User)
        student_id: Student participant (User)
        created_at: When the conversation was created
        last_message_at: When the most recent message was sent
    """

    __tablename__ = "conversations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    coach_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    last_message_at = Column(DateTime(timezone=True), nullable=True)

    coach = relationship("User", foreign_keys=[coach_id])
    student = relationship("User", foreign_keys=[student_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        order_by="Message.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("coach_id", "student_id", name="uq_conversations_coach_student"),
        Index("idx_conversations_student", "student_id"),
        Index("idx_conversations_last_message", "last_message_at"),
    )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, coach={self.coach_id}, student={self.student_id})>"

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.coach_id, self.student_id)

    def get_other_user_id(self, current_user_id: str) -> str:
        if current_user_id == self.student_id:
            return str(self.coach_id)
        return str(self.student_id)
