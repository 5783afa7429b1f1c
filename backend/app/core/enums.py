# backend/app/core/enums.py
"""
Core enums for the BookAPro platform.

These enums are the closed set of values the platform understands for roles,
approval state and login providers. Database columns store the string value.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles a user can hold.

    A user has exactly one role. The role decides which booking transitions
    and admin operations are open to the user (see ``app.core.authz``).
    """

    ADMIN = "admin"
    COACH = "coach"
    STUDENT = "student"


class ApprovalStatus(str, Enum):
    """Admin-controlled gate deciding whether a coach profile is publicly listed."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AuthProvider(str, Enum):
    """Where the user's credentials live."""

    LOCAL = "local"
    GOOGLE = "google"


class AdminActionType(str, Enum):
    """Actions recorded in the admin audit log."""

    APPROVE_COACH = "approve_coach"
    REJECT_COACH = "reject_coach"
    DELETE_COACH = "delete_coach"
    DELETE_STUDENT = "delete_student"
