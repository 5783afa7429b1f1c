# backend/app/services/coach_service.py
"""
Coach Service for the BookAPro platform

Handles the public coach directory and coach self-registration:
- Listing and searching approved coaches
- Profile detail (approved profiles, or the owner's own)
- Registering a coach account with a pending profile
- Editing a coach's own profile
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.constants import ERROR_COACH_NOT_FOUND
from ..core.enums import ApprovalStatus, RoleName
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.coach import CoachProfile
from ..principal import AuthenticatedUser
from ..repositories.coach_repository import SORT_OPTIONS, CoachRepository
from ..repositories.factory import RepositoryFactory
from .auth_service import AuthService
from .base import BaseService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "bio",
        "location",
        "price_per_hour",
        "years_experience",
        "pga_certification_id",
        "image",
        "specialties",
        "tools",
        "certifications",
        "videos",
    }
)


class CoachService(BaseService):
    """Service for coach directory and registration operations."""

    def __init__(self, db: Session, repository: Optional[CoachRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_coach_repository(db)
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("list_approved_coaches")
    def list_approved_coaches(self) -> List[CoachProfile]:
        return self.repository.search()

    @BaseService.measure_operation("search_coaches")
    def search_coaches(
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
        Search approved coaches.

        Raises:
            ValidationException: Unknown sort key or an inverted price range
        """
        if sort and sort not in SORT_OPTIONS:
            raise ValidationException(
                f"Unknown sort option: {sort}", details={"allowed": sorted(SORT_OPTIONS)}
            )
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationException("minPrice cannot be greater than maxPrice")

        return self.repository.search(
            location=location,
            specialties=specialties,
            tools=tools,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            sort=sort,
        )

    @BaseService.measure_operation("get_coach")
    def get_coach(
        self, coach_id: str, principal: Optional[AuthenticatedUser] = None
    ) -> CoachProfile:
        """
        Coach profile detail.

        Pending and rejected profiles are only visible to their owner and admins.
        """
        coach = self.repository.get_by_id(coach_id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)
        if coach.is_approved:
            return coach
        if principal is not None and (principal.is_admin or principal.id == coach.user_id):
            return coach
        raise NotFoundException(ERROR_COACH_NOT_FOUND)

    def get_own_profile(self, principal: AuthenticatedUser) -> CoachProfile:
        coach = self.repository.get_by_user_id(principal.id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)
        return coach

    @BaseService.measure_operation("update_own_profile")
    def update_own_profile(self, principal: AuthenticatedUser, **changes: Any) -> CoachProfile:
        """
        Edit the calling coach's profile.

        Accepts any of the editable fields; specialties, tools, certifications
        and videos replace the stored lists when given.

        Raises:
            NotFoundException: The caller has no coach profile
            ValidationException: Invalid price, experience or name
        """
        coach = self.get_own_profile(principal)
        return self._apply_profile_changes(coach, changes)

    @BaseService.measure_operation("update_coach")
    def update_coach(
        self, principal: AuthenticatedUser, coach_id: str, **changes: Any
    ) -> CoachProfile:
        """Edit a profile by id. Only its owner may do so."""
        coach = self.repository.get_by_id(coach_id)
        if coach is None:
            raise NotFoundException(ERROR_COACH_NOT_FOUND)
        if coach.user_id != principal.id:
            raise ForbiddenException("Not authorized to update this coach profile")
        return self._apply_profile_changes(coach, changes)

    def _apply_profile_changes(self, coach: CoachProfile, changes: Dict[str, Any]) -> CoachProfile:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(
                "Unknown profile fields", details={"fields": sorted(unknown)}
            )
        changes = dict(changes)
        if "name" in changes:
            if not changes["name"] or not changes["name"].strip():
                raise ValidationException("name cannot be empty")
            changes["name"] = changes["name"].strip()
        if "price_per_hour" in changes:
            price = changes["price_per_hour"]
            if price is None or Decimal(price) <= 0:
                raise ValidationException("pricePerHour must be greater than zero")
            changes["price_per_hour"] = Decimal(price)
        if "years_experience" in changes:
            years = changes["years_experience"]
            if years is None or years < 0:
                raise ValidationException("yearsExperience cannot be negative")

        for key in ("specialties", "tools", "certifications"):
            if key in changes:
                changes[key] = _clean(changes[key] or [])
        if "videos" in changes:
            changes["videos"] = list(changes["videos"] or [])

        with self.transaction():
            self.repository.update_profile(coach, **changes)

        self.log_operation("coach_profile_updated", coach_id=coach.id, fields=sorted(changes))
        return coach

    @BaseService.measure_operation("register_coach")
    def register_coach(
        self,
        email: str,
        password: str,
        name: str,
        price_per_hour: Decimal,
        bio: Optional[str] = None,
        location: Optional[str] = None,
        years_experience: int = 0,
        pga_certification_id: Optional[str] = None,
        image: Optional[str] = None,
        specialties: Sequence[str] = (),
        tools: Sequence[str] = (),
        certifications: Sequence[str] = (),
        videos: Sequence[Dict[str, Any]] = (),
        timezone: Optional[str] = None,
    ) -> CoachProfile:
        """
        Create a coach account and a pending profile in one transaction.

        Raises:
            ConflictException: Email already registered
            ValidationException: Invalid price or experience
        """
        if price_per_hour is None or Decimal(price_per_hour) <= 0:
            raise ValidationException("pricePerHour must be greater than zero")
        if years_experience < 0:
            raise ValidationException("yearsExperience cannot be negative")

        auth_service = AuthService(self.db)
        with self.transaction():
            user = auth_service.create_user_account(email, password, RoleName.COACH, timezone)
            coach = self.repository.create_profile(
                user_id=user.id,
                name=name.strip(),
                bio=bio,
                location=location,
                price_per_hour=Decimal(price_per_hour),
                years_experience=years_experience,
                pga_certification_id=pga_certification_id,
                image=image,
                approval_status=ApprovalStatus.PENDING.value,
                specialties=_clean(specialties),
                tools=_clean(tools),
                certifications=_clean(certifications),
                videos=videos,
            )

        self.log_operation("coach_registered", coach_id=coach.id, user_id=user.id)
        return coach


def _clean(values: Sequence[str]) -> List[str]:
    """Strip blanks and drop case-insensitive duplicates, keeping order."""
    seen = set()
    cleaned = []
    for value in values:
        text = value.strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            cleaned.append(text)
    return cleaned
