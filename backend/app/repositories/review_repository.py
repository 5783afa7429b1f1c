# backend/app/repositories/review_repository.py
"""Review Repository: per-booking reviews and coach rating aggregates."""

import logging
from typing import List, Optional, Tuple, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.review import Review
from ..models.student import StudentProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_by_booking_id(self, booking_id: str) -> Optional[Review]:
        return self.find_one_by(booking_id=booking_id)

    def list_for_coach(self, coach_id: str) -> List[Review]:
        """Reviews for a coach, newest first."""
        try:
            return cast(
                List[Review],
                (
                    self.db.query(Review)
                    .options(joinedload(Review.student).joinedload(StudentProfile.user))
                    .filter(Review.coach_id == coach_id)
                    .order_by(Review.created_at.desc(), Review.id.desc())
                    .all()
                ),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews for coach {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to list reviews: {str(e)}")

    def get_rating_stats(self, coach_id: str) -> Tuple[float, int]:
        """Return (average rating, review count) for a coach; (0.0, 0) when none."""
        try:
            avg, count = (
                self.db.query(func.avg(Review.rating), func.count(Review.id))
                .filter(Review.coach_id == coach_id)
                .one()
            )
            return (round(float(avg), 2) if avg is not None else 0.0, int(count or 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error computing rating stats for coach {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute rating stats: {str(e)}")
