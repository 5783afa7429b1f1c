# backend/app/repositories/booking_repository.py
"""
Booking Repository for the BookAPro platform.

Data access for lesson bookings: participant listings, active bookings per
coach and date (used for overlap checks and available times), and admin
listings.
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..models.coach import CoachProfile
from ..models.student import StudentProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for booking data access.

    Status changes are done by the service on the loaded entity; this class
    only reads and inserts.
    """

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_active_bookings_for_coach_between(
        self, coach_id: str, first_date: date, last_date: date
    ) -> List[Booking]:
        """Pending or confirmed bookings of ``coach_id`` dated within the inclusive range."""
        try:
            return cast(
                List[Booking],
                (
                    self.db.query(Booking)
                    .filter(
                        Booking.coach_id == coach_id,
                        Booking.booking_date >= first_date,
                        Booking.booking_date <= last_date,
                        Booking.status.in_([s.value for s in BookingStatus.active()]),
                    )
                    .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
                    .all()
                ),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting active bookings for coach {coach_id}: {str(e)}")
            raise RepositoryException(f"Failed to get coach bookings: {str(e)}")

    def get_bookings_for_participant(
        self,
        student_profile_id: Optional[str] = None,
        coach_profile_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Bookings where the caller is the student or the coach.

        Ordered by date descending, then start time descending. Student and
        coach profiles are eager loaded for display names.
        """
        conditions = []
        if student_profile_id:
            conditions.append(Booking.student_id == student_profile_id)
        if coach_profile_id:
            conditions.append(Booking.coach_id == coach_profile_id)
        if not conditions:
            return []

        try:
            query = self._apply_eager_loading(self.db.query(Booking)).filter(or_(*conditions))
            return cast(
                List[Booking],
                query.order_by(Booking.booking_date.desc(), Booking.start_time.desc()).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for participant: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def get_all_bookings(self, status: Optional[str] = None) -> List[Booking]:
        """Every booking (admin listing), newest lesson first."""
        try:
            query = self._apply_eager_loading(self.db.query(Booking))
            if status:
                query = query.filter(Booking.status == status)
            return cast(
                List[Booking],
                query.order_by(Booking.booking_date.desc(), Booking.start_time.desc()).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing all bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        return self.get_by_id(booking_id, load_relationships=True)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.student).joinedload(StudentProfile.user),
            joinedload(Booking.coach).joinedload(CoachProfile.user),
        )
