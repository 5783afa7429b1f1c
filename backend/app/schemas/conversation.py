# backend/app/schemas/conversation.py
"""
Schemas for coach-student conversations and their messages.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel


class ConversationCreateRequest(StrictRequestModel):
    """
    Open (or fetch) the conversation of a coach-student pair.

    ``coachId`` is the coach's user id. ``studentId`` is the student's
    profile id; students may omit it to use their own profile.
    """

    coach_id: Optional[str] = None
    student_id: Optional[str] = None


class ConversationResponse(StrictModel):
    id: str
    coach_id: str
    student_id: str
    created_at: datetime
    last_message_at: Optional[datetime] = None


class SendMessageRequest(StrictRequestModel):
    conversation_id: str = Field(..., min_length=1)
    content: str = Field(..., description="Trimmed server-side; 1-2000 characters")


class MessageResponse(StrictModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class ConversationSummaryResponse(StrictModel):
    """One inbox row."""

    id: str
    coach_id: str
    coach_name: str
    student_id: str
    student_name: str
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0


class ConversationListResponse(StrictModel):
    conversations: List[ConversationSummaryResponse]


class MarkReadResponse(StrictModel):
    updated: int


class UnreadCountResponse(StrictModel):
    count: int
