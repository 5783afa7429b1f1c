# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_principal, get_current_user, get_optional_principal, require_admin
from .database import get_db
from .services import (
    get_admin_service,
    get_auth_service,
    get_booking_service,
    get_coach_service,
    get_conversation_service,
    get_review_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_current_principal",
    "get_optional_principal",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_admin_service",
    "get_auth_service",
    "get_booking_service",
    "get_coach_service",
    "get_conversation_service",
    "get_review_service",
]
