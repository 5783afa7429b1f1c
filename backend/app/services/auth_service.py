# backend/app/services/auth_service.py
"""
Authentication Service for the BookAPro platform

Handles user registration, authentication, and user retrieval operations.
Follows the service layer pattern to keep business logic out of routes.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth import DUMMY_HASH_FOR_TIMING_ATTACK, get_password_hash, verify_password
from ..core.constants import ERROR_USER_NOT_FOUND
from ..core.enums import AuthProvider, RoleName
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.timezone_utils import DEFAULT_TIMEZONE
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.student_repository = RepositoryFactory.create_student_repository(db)

    def create_user_account(
        self,
        email: str,
        password: str,
        role: RoleName,
        timezone: Optional[str] = None,
    ) -> User:
        """
        Insert a local user account (flush only, caller owns the transaction).

        Raises:
            ValidationException: Password too short
            ConflictException: Email already registered
        """
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        normalized_email = email.strip().lower()
        if self.user_repository.email_exists(normalized_email):
            self.logger.warning(f"Registration failed - email already exists: {normalized_email}")
            raise ConflictException("Email already registered")

        return self.user_repository.create(
            email=normalized_email,
            hashed_password=get_password_hash(password),
            role=role.value,
            auth_provider=AuthProvider.LOCAL.value,
            timezone=timezone or DEFAULT_TIMEZONE,
        )

    @BaseService.measure_operation("register_student")
    def register_student(
        self,
        email: str,
        password: str,
        name: str,
        phone: Optional[str] = None,
        skill_level: Optional[str] = None,
        preferences: Optional[str] = None,
        timezone: Optional[str] = None,
    ) -> User:
        """
        Register a student account together with its student profile.

        Raises:
            ConflictException: If email already exists
            ValidationException: If data is invalid
        """
        self.log_operation("register_student", email=email)

        with self.transaction():
            user = self.create_user_account(email, password, RoleName.STUDENT, timezone)
            self.student_repository.create(
                user_id=user.id,
                name=name.strip(),
                phone=phone,
                skill_level=skill_level,
                preferences=preferences,
            )

        self.db.refresh(user)
        self.logger.info(f"Successfully registered student: {user.email}")
        return user

    @BaseService.measure_operation("create_admin")
    def create_admin(self, email: str, password: str) -> User:
        """Create an admin account (used by the ``create_admin`` command)."""
        with self.transaction():
            user = self.create_user_account(email, password, RoleName.ADMIN)
        self.logger.info(f"Created admin user: {user.email}")
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        user = self.user_repository.get_by_email(email)
        if not user:
            # Burn the same bcrypt time as a real check
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            self.logger.warning(f"Authentication failed - user not found: {email}")
            return None

        if not verify_password(password, user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {email}")
            return None

        if not user.is_active:
            self.logger.warning(f"Authentication failed - account inactive: {email}")
            return None

        self.logger.info(f"Successful authentication for user: {user.email}")
        return user

    def get_user_by_id(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException(ERROR_USER_NOT_FOUND)
        return user
