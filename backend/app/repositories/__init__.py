# backend/app/repositories/__init__.py
"""
Repository layer for the BookAPro platform.

This package provides data access separated from business logic.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- RepositoryFactory: Factory for creating repository instances
- ConversationRepository / MessageRepository: Messaging store
- BookingRepository: Lesson bookings
- CoachRepository / StudentRepository / UserRepository: Accounts and profiles
- ReviewRepository / AdminActionRepository: Reviews and the admin audit log

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.get_active_bookings_for_coach_between(coach_id, day, day)
"""

from .admin_action_repository import AdminActionRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .coach_repository import CoachRepository
from .conversation_repository import ConversationRepository
from .factory import RepositoryFactory
from .message_repository import MessageRepository
from .review_repository import ReviewRepository
from .student_repository import StudentRepository
from .user_repository import UserRepository

__all__ = [
    "AdminActionRepository",
    "BaseRepository",
    "BookingRepository",
    "CoachRepository",
    "ConversationRepository",
    "MessageRepository",
    "RepositoryFactory",
    "ReviewRepository",
    "StudentRepository",
    "UserRepository",
]
