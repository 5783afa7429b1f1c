# backend/app/repositories/student_repository.py
"""Student Repository for the BookAPro platform."""

import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.student import StudentProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StudentRepository(BaseRepository[StudentProfile]):
    """Repository for student profile data access."""

    def __init__(self, db: Session):
        super().__init__(db, StudentProfile)

    def get_by_user_id(self, user_id: str) -> Optional[StudentProfile]:
        return self.find_one_by(user_id=user_id)

    def list_all(self) -> List[StudentProfile]:
        try:
            query = self._apply_eager_loading(self.db.query(StudentProfile))
            return cast(
                List[StudentProfile], query.order_by(StudentProfile.created_at.desc()).all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing students: {str(e)}")
            raise RepositoryException(f"Failed to list students: {str(e)}")

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(StudentProfile.user))
