# backend/app/services/review_service.py
"""
Review Service for the BookAPro platform.

Students review completed lessons, once per booking. Each new review
refreshes the coach's aggregate rating and review count.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import (
    ERROR_BOOKING_NOT_FOUND,
    ERROR_COACH_NOT_FOUND,
    MAX_RATING,
    MAX_REVIEW_LENGTH,
    MIN_RATING,
)
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.booking import BookingStatus
from ..models.review import Review
from ..principal import AuthenticatedUser
from ..repositories.factory import RepositoryFactory
from ..repositories.review_repository import ReviewRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(self, db: Session, repository: Optional[ReviewRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_review_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("create_review")
    def create_review(
        self,
        principal: AuthenticatedUser,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Review a completed booking.

        Raises:
            ValidationException: Rating outside 1-5, comment too long, or
                the booking is not completed
            NotFoundException: Unknown booking
            ForbiddenException: Caller is not the booking's student
            ConflictException: The booking already has a review
        """
        if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationException(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                details={"rating": rating},
            )
        text = (comment or "").strip() or None
        if text and len(text) > MAX_REVIEW_LENGTH:
            raise ValidationException(
                f"Review cannot exceed {MAX_REVIEW_LENGTH} characters",
            )

        booking = self.booking_repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException(ERROR_BOOKING_NOT_FOUND)
        if booking.student.user_id != principal.id:
            raise ForbiddenException("Only the student on this booking can review it")
        if booking.status != BookingStatus.COMPLETED.value:
            raise ValidationException("Only completed lessons can be reviewed")
        if self.repository.get_by_booking_id(booking.id) is not None:
            raise ConflictException(
                "This booking has already been reviewed", code="REVIEW_EXISTS"
            )

        with self.transaction():
            review = self.repository.create(
                booking_id=booking.id,
                coach_id=booking.coach_id,
                student_id=booking.student_id,
                rating=rating,
                comment=text,
            )
            average, count = self.repository.get_rating_stats(booking.coach_id)
            self.coach_repository.update(booking.coach_id, rating=average, review_count=count)

        self.log_operation(
            "review_created", review_id=review.id, booking_id=booking.id, rating=rating
        )
        return review

    @BaseService.measure_operation("list_reviews_for_coach")
    def list_reviews_for_coach(self, coach_id: str) -> List[Review]:
        if self.coach_repository.get_by_id(coach_id, load_relationships=False) is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)
        return self.repository.list_for_coach(coach_id)
