# backend/app/services/admin_service.py
"""
Admin Service for the BookAPro platform

Admin-only operations:
- Coach approval workflow (approve / reject pending profiles)
- Listing every coach, student and booking
- Deleting coach and student accounts
- Reading the admin action log

Every mutating operation is recorded in ``admin_actions``.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import ERROR_ADMIN_ONLY, ERROR_COACH_NOT_FOUND, ERROR_STUDENT_NOT_FOUND
from ..core.enums import AdminActionType, ApprovalStatus
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.admin_action import AdminAction
from ..models.booking import Booking, BookingStatus
from ..models.coach import CoachProfile
from ..models.student import StudentProfile
from ..principal import AuthenticatedUser
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class AdminService(BaseService):
    """Service for admin workflows."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.student_repository = RepositoryFactory.create_student_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.action_repository = RepositoryFactory.create_admin_action_repository(db)
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("list_pending_coaches")
    def list_pending_coaches(self, principal: AuthenticatedUser) -> List[CoachProfile]:
        self._require_admin(principal)
        return self.coach_repository.list_by_status(ApprovalStatus.PENDING.value)

    @BaseService.measure_operation("approve_coach")
    def approve_coach(self, principal: AuthenticatedUser, coach_id: str) -> CoachProfile:
        return self._set_approval(principal, coach_id, ApprovalStatus.APPROVED)

    @BaseService.measure_operation("reject_coach")
    def reject_coach(
        self, principal: AuthenticatedUser, coach_id: str, reason: Optional[str] = None
    ) -> CoachProfile:
        return self._set_approval(principal, coach_id, ApprovalStatus.REJECTED, reason)

    @BaseService.measure_operation("list_coaches")
    def list_coaches(
        self, principal: AuthenticatedUser, approval_status: Optional[str] = None
    ) -> List[CoachProfile]:
        self._require_admin(principal)
        if approval_status and approval_status not in {s.value for s in ApprovalStatus}:
            raise ValidationException(f"Unknown approval status: {approval_status}")
        return self.coach_repository.list_by_status(approval_status)

    @BaseService.measure_operation("list_students")
    def list_students(self, principal: AuthenticatedUser) -> List[StudentProfile]:
        self._require_admin(principal)
        return self.student_repository.list_all()

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, principal: AuthenticatedUser, status: Optional[str] = None
    ) -> List[Booking]:
        self._require_admin(principal)
        if status and status not in {s.value for s in BookingStatus}:
            raise ValidationException(f"Unknown booking status: {status}")
        return self.booking_repository.get_all_bookings(status)

    @BaseService.measure_operation("delete_coach")
    def delete_coach(self, principal: AuthenticatedUser, coach_id: str) -> None:
        """Delete a coach account with its profile, bookings and reviews."""
        self._require_admin(principal)
        coach = self.coach_repository.get_by_id(coach_id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)

        with self.transaction():
            self.action_repository.log(
                admin_id=principal.id,
                action=AdminActionType.DELETE_COACH.value,
                target_type="coach",
                target_id=coach.id,
                details={"name": coach.name, "email": coach.user.email},
            )
            self.user_repository.delete(coach.user_id)

        self.log_operation("coach_deleted", coach_id=coach_id, admin_id=principal.id)

    @BaseService.measure_operation("delete_student")
    def delete_student(self, principal: AuthenticatedUser, student_id: str) -> None:
        """Delete a student account with its profile, bookings and reviews."""
        self._require_admin(principal)
        student = self.student_repository.get_by_id(student_id)
        if student is None:
            raise NotFoundException(ERROR_STUDENT_NOT_FOUND)

        with self.transaction():
            self.action_repository.log(
                admin_id=principal.id,
                action=AdminActionType.DELETE_STUDENT.value,
                target_type="student",
                target_id=student.id,
                details={"name": student.name, "email": student.user.email},
            )
            self.user_repository.delete(student.user_id)

        self.log_operation("student_deleted", student_id=student_id, admin_id=principal.id)

    @BaseService.measure_operation("list_actions")
    def list_actions(self, principal: AuthenticatedUser, limit: int = 100) -> List[AdminAction]:
        self._require_admin(principal)
        return self.action_repository.list_recent(limit)

    # Helpers

    def _set_approval(
        self,
        principal: AuthenticatedUser,
        coach_id: str,
        status: ApprovalStatus,
        reason: Optional[str] = None,
    ) -> CoachProfile:
        self._require_admin(principal)
        coach = self.coach_repository.get_by_id(coach_id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)

        action = (
            AdminActionType.APPROVE_COACH
            if status == ApprovalStatus.APPROVED
            else AdminActionType.REJECT_COACH
        )
        previous = coach.approval_status
        with self.transaction():
            coach.approval_status = status.value
            coach.approved_by = principal.id
            coach.approved_at = datetime.now(timezone.utc)
            details = {"previous_status": previous}
            if reason:
                details["reason"] = reason
            self.action_repository.log(
                admin_id=principal.id,
                action=action.value,
                target_type="coach",
                target_id=coach.id,
                details=details,
            )

        self.log_operation(
            action.value, coach_id=coach.id, admin_id=principal.id, previous_status=previous
        )
        return coach

    @staticmethod
    def _require_admin(principal: AuthenticatedUser) -> None:
        if not principal.is_admin:
            raise ForbiddenException(ERROR_ADMIN_ONLY)
