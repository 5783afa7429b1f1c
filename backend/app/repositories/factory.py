# backend/app/repositories/factory.py
"""
Repository Factory for the BookAPro platform.

Provides centralized creation of repository instances, ensuring consistent
initialization and dependency injection for the service layer.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .admin_action_repository import AdminActionRepository
    from .booking_repository import BookingRepository
    from .coach_repository import CoachRepository
    from .conversation_repository import ConversationRepository
    from .message_repository import MessageRepository
    from .review_repository import ReviewRepository
    from .student_repository import StudentRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services never construct data access
    objects directly.
    """

    @staticmethod
    def create_base_repository(db: Session, model: Any) -> BaseRepository[Any]:
        """Create a generic base repository for any model."""
        return BaseRepository(db, model)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_coach_repository(db: Session) -> "CoachRepository":
        from .coach_repository import CoachRepository

        return CoachRepository(db)

    @staticmethod
    def create_student_repository(db: Session) -> "StudentRepository":
        from .student_repository import StudentRepository

        return StudentRepository(db)

    @staticmethod
    def create_conversation_repository(db: Session) -> "ConversationRepository":
        """Create repository for per-pair conversations."""
        from .conversation_repository import ConversationRepository

        return ConversationRepository(db)

    @staticmethod
    def create_message_repository(db: Session) -> "MessageRepository":
        """Create repository for chat messages."""
        from .message_repository import MessageRepository

        return MessageRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_review_repository(db: Session) -> "ReviewRepository":
        from .review_repository import ReviewRepository

        return ReviewRepository(db)

    @staticmethod
    def create_admin_action_repository(db: Session) -> "AdminActionRepository":
        from .admin_action_repository import AdminActionRepository

        return AdminActionRepository(db)
