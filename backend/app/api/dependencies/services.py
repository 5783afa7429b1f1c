# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.admin_service import AdminService
from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.coach_service import CoachService
from ...services.conversation_service import ConversationService
from ...services.review_service import ReviewService
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_coach_service(db: Session = Depends(get_db)) -> CoachService:
    return CoachService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session

    Returns:
        BookingService instance
    """
    return BookingService(db)


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)
