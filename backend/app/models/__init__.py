"""
Database models for the BookAPro platform.

This module exports all SQLAlchemy models used in the application:
- User authentication and roles
- Coach and student profiles
- Messaging (conversations and messages)
- Bookings and reviews
- Admin audit log
"""

from .admin_action import AdminAction
from .booking import Booking, BookingStatus, LessonType
from .coach import CoachCertification, CoachProfile, CoachSpecialty, CoachTool, CoachVideo
from .conversation import Conversation
from .message import Message
from .review import Review
from .student import StudentProfile
from .user import User

__all__ = [
    "AdminAction",
    "Booking",
    "BookingStatus",
    "CoachCertification",
    "CoachProfile",
    "CoachSpecialty",
    "CoachTool",
    "CoachVideo",
    "Conversation",
    "LessonType",
    "Message",
    "Review",
    "StudentProfile",
    "User",
]
