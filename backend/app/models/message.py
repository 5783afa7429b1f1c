# backend/app/models/message.py
"""
Message model for the chat system.

Messages are append-only. Each belongs to one conversation and is removed
together with it.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship
import ulid

from ..core.constants import MAX_MESSAGE_LENGTH
from ..database import Base


class Message(Base):
    """A single chat message inside a conversation."""

    __tablename__ = "messages"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    conversation_id = Column(
        String(26), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    sender_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(MAX_MESSAGE_LENGTH), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        CheckConstraint("length(content) > 0", name="ck_messages_content_not_empty"),
        Index("idx_messages_conversation_created", "conversation_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Message {self.id} in {self.conversation_id} from {self.sender_id}>"
