# backend/app/repositories/coach_repository.py
"""
Coach Repository for the BookAPro platform.

Handles coach profile lookups, public listing and search, admin approval
queries and the per-coach row lock used to serialise bookings.
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Sequence, cast

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import ApprovalStatus
from ..core.exceptions import RepositoryException
from ..models.coach import (
    CoachCertification,
    CoachProfile,
    CoachSpecialty,
    CoachTool,
    CoachVideo,
)
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

# Search sort keys accepted by ``search``
SORT_OPTIONS = {
    "rating": (CoachProfile.rating.desc(), CoachProfile.review_count.desc()),
    "price_low": (CoachProfile.price_per_hour.asc(),),
    "price_high": (CoachProfile.price_per_hour.desc(),),
    "experience": (CoachProfile.years_experience.desc(),),
}


class CoachRepository(BaseRepository[CoachProfile]):
    """
    Repository for coach profile data access.

    Child collections (specialties, tools, certifications, videos) are
    loaded with ``selectin`` on the model, so every query here returns
    fully populated profiles.
    """

    def __init__(self, db: Session):
        super().__init__(db, CoachProfile)
        self.logger = logging.getLogger(__name__)

    def get_by_user_id(self, user_id: str) -> Optional[CoachProfile]:
        return self.find_one_by(user_id=user_id)

    def get_approved_by_id(self, coach_id: str) -> Optional[CoachProfile]:
        return self.find_one_by(id=coach_id, approval_status=ApprovalStatus.APPROVED.value)

    def lock_for_booking(self, coach_id: str) -> Optional[CoachProfile]:
        """
        Load a coach profile, taking a row lock on PostgreSQL.

        Held until the surrounding transaction ends, so concurrent bookings
        for the same coach run their overlap check one at a time.
        """
        try:
            stmt = select(CoachProfile).where(CoachProfile.id == coach_id)
            if self.dialect_name == "postgresql":
                stmt = stmt.with_for_update()
            return cast(Optional[CoachProfile], self.db.execute(stmt).scalar_one_or_none())
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking coach {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock coach: {str(e)}")

    def list_by_status(self, approval_status: Optional[str] = None) -> List[CoachProfile]:
        """Coaches filtered by approval status (all when None), newest first."""
        try:
            query = self._apply_eager_loading(self.db.query(CoachProfile))
            if approval_status:
                query = query.filter(CoachProfile.approval_status == approval_status)
            return cast(List[CoachProfile], query.order_by(CoachProfile.created_at.desc()).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing coaches: {str(e)}")
            raise RepositoryException(f"Failed to list coaches: {str(e)}")

    def search(
        self,
        location: Optional[str] = None,
        specialties: Optional[Sequence[str]] = None,
        tools: Optional[Sequence[str]] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        sort: Optional[str] = None,
    ) -> List[CoachProfile]:
        """
        Approved coaches matching every supplied filter.

        ``specialties`` and ``tools`` match when the coach has at least one
        of the listed values (case-insensitive). ``location`` is a
        case-insensitive substring match.
        """
        try:
            query = self._apply_eager_loading(self.db.query(CoachProfile)).filter(
                CoachProfile.approval_status == ApprovalStatus.APPROVED.value
            )
            if location:
                query = query.filter(
                    func.lower(CoachProfile.location).contains(location.strip().lower())
                )
            if specialties:
                wanted = [s.strip().lower() for s in specialties if s.strip()]
                if wanted:
                    query = query.filter(
                        CoachProfile.id.in_(
                            select(CoachSpecialty.coach_id).where(
                                func.lower(CoachSpecialty.specialty).in_(wanted)
                            )
                        )
                    )
            if tools:
                wanted_tools = [t.strip().lower() for t in tools if t.strip()]
                if wanted_tools:
                    query = query.filter(
                        CoachProfile.id.in_(
                            select(CoachTool.coach_id).where(
                                func.lower(CoachTool.tool).in_(wanted_tools)
                            )
                        )
                    )
            if min_price is not None:
                query = query.filter(CoachProfile.price_per_hour >= min_price)
            if max_price is not None:
                query = query.filter(CoachProfile.price_per_hour <= max_price)
            if min_rating is not None:
                query = query.filter(CoachProfile.rating >= min_rating)

            order = SORT_OPTIONS.get(sort or "rating", SORT_OPTIONS["rating"])
            return cast(
                List[CoachProfile],
                query.order_by(*order, CoachProfile.created_at.desc()).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching coaches: {str(e)}")
            raise RepositoryException(f"Failed to search coaches: {str(e)}")

    def create_profile(
        self,
        *,
        specialties: Sequence[str] = (),
        tools: Sequence[str] = (),
        certifications: Sequence[str] = (),
        videos: Sequence[Dict[str, Any]] = (),
        **fields: Any,
    ) -> CoachProfile:
        """Insert a coach profile together with its child rows (flush only)."""
        try:
            coach = CoachProfile(**fields)
            coach.specialties = [CoachSpecialty(specialty=s) for s in specialties]
            coach.tools = [CoachTool(tool=t) for t in tools]
            coach.certifications = [CoachCertification(certification=c) for c in certifications]
            coach.videos = [CoachVideo(**video) for video in videos]
            self.db.add(coach)
            self.db.flush()
            return coach
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating coach profile: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create coach profile: {str(e)}")

    def update_profile(
        self,
        coach: CoachProfile,
        *,
        specialties: Optional[Sequence[str]] = None,
        tools: Optional[Sequence[str]] = None,
        certifications: Optional[Sequence[str]] = None,
        videos: Optional[Sequence[Dict[str, Any]]] = None,
        **fields: Any,
    ) -> CoachProfile:
        """
        Apply scalar changes and replace each child collection that is given.

        A collection left as None is untouched; orphaned child rows are
        deleted by the relationship cascade (flush only).
        """
        try:
            for key, value in fields.items():
                setattr(coach, key, value)
            if specialties is not None:
                coach.specialties = [CoachSpecialty(specialty=s) for s in specialties]
            if tools is not None:
                coach.tools = [CoachTool(tool=t) for t in tools]
            if certifications is not None:
                coach.certifications = [
                    CoachCertification(certification=c) for c in certifications
                ]
            if videos is not None:
                coach.videos = [CoachVideo(**video) for video in videos]
            self.db.flush()
            return coach
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating coach profile {coach.id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update coach profile: {str(e)}")

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(CoachProfile.user))
