# backend/app/repositories/user_repository.py
"""
User Repository for the BookAPro platform.

Handles User lookups used by authentication and the messaging layer.
"""

import logging
from typing import Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email address."""
        try:
            return cast(
                Optional[User],
                self._apply_eager_loading(self.db.query(User))
                .filter(func.lower(User.email) == email.strip().lower())
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(User.coach_profile), joinedload(User.student_profile))
