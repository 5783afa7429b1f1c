# backend/app/schemas/__init__.py
"""
Pydantic schemas for the BookAPro API.

Field names are snake_case in Python and camelCase on the wire.
"""

from .admin import (
    AdminActionListResponse,
    AdminActionResponse,
    AdminBookingListResponse,
    CoachListResponse,
    CoachRejectRequest,
    DeleteResponse,
    StudentListResponse,
    StudentResponse,
)
from .auth import LoginRequest, LoginResponse, LogoutResponse, StudentRegisterRequest, UserResponse
from .booking import BookingCreate, BookingListResponse, BookingResponse, BookingStatusUpdate
from .coach import (
    AvailableTimesResponse,
    CoachProfileUpdate,
    CoachRegisterRequest,
    CoachResponse,
    CoachVideoPayload,
)
from .conversation import (
    ConversationCreateRequest,
    ConversationListResponse,
    ConversationResponse,
    ConversationSummaryResponse,
    MarkReadResponse,
    MessageResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from .main_responses import HealthResponse
from .review import ReviewCreate, ReviewResponse

__all__ = [
    "AdminActionListResponse",
    "AdminActionResponse",
    "AdminBookingListResponse",
    "AvailableTimesResponse",
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    "CoachListResponse",
    "CoachProfileUpdate",
    "CoachRegisterRequest",
    "CoachRejectRequest",
    "CoachResponse",
    "CoachVideoPayload",
    "ConversationCreateRequest",
    "ConversationListResponse",
    "ConversationResponse",
    "ConversationSummaryResponse",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "MarkReadResponse",
    "MessageResponse",
    "ReviewCreate",
    "ReviewResponse",
    "SendMessageRequest",
    "StudentListResponse",
    "StudentRegisterRequest",
    "StudentResponse",
    "UnreadCountResponse",
    "UserResponse",
]
