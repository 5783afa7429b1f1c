# backend/app/routes/v1/coaches.py
"""
Coach directory routes.

Endpoints under /api/coaches:
    GET /                              -> Approved coaches
    GET /search                        -> Filter and sort approved coaches
    POST /register                     -> Coach sign-up (profile pending approval)
    GET /me                            -> The calling coach's own profile
    PUT /me                            -> Edit the calling coach's profile
    GET /{coach_id}                    -> Profile detail
    PUT /{coach_id}                    -> Edit a profile (owner only)
    GET /{coach_id}/available-times    -> Free default slots on a date
"""

import asyncio
from datetime import date
from decimal import Decimal
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies.auth import get_current_principal, get_optional_principal
from ...api.dependencies.services import get_booking_service, get_coach_service
from ...core.exceptions import DomainException
from ...principal import AuthenticatedUser
from ...schemas.admin import CoachListResponse
from ...schemas.coach import (
    AvailableTimesResponse,
    CoachProfileUpdate,
    CoachRegisterRequest,
    CoachResponse,
)
from ...services.booking_service import BookingService
from ...services.coach_service import CoachService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["coaches"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _split_terms(values: Optional[List[str]]) -> List[str]:
    """Accept both repeated params and comma-separated lists."""
    terms: List[str] = []
    for value in values or []:
        terms.extend(part.strip() for part in value.split(",") if part.strip())
    return terms


@router.get("", response_model=CoachListResponse)
async def list_coaches(
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachListResponse:
    try:
        coaches = await asyncio.to_thread(coach_service.list_approved_coaches)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachListResponse(coaches=[CoachResponse.from_profile(c) for c in coaches])


@router.get("/search", response_model=CoachListResponse)
async def search_coaches(
    location: Optional[str] = Query(None, max_length=255),
    specialties: Optional[List[str]] = Query(None),
    tools: Optional[List[str]] = Query(None),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    sort: Optional[str] = Query(None, description="rating, price_low, price_high or experience"),
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachListResponse:
    try:
        coaches = await asyncio.to_thread(
            coach_service.search_coaches,
            location=location,
            specialties=_split_terms(specialties),
            tools=_split_terms(tools),
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            sort=sort,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return CoachListResponse(coaches=[CoachResponse.from_profile(c) for c in coaches])


@router.post("/register", response_model=CoachResponse, status_code=status.HTTP_201_CREATED)
async def register_coach(
    payload: CoachRegisterRequest,
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachResponse:
    """Create a coach account. The profile stays hidden until an admin approves it."""
    try:
        coach = await asyncio.to_thread(
            coach_service.register_coach,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            price_per_hour=payload.price_per_hour,
            bio=payload.bio,
            location=payload.location,
            years_experience=payload.years_experience,
            pga_certification_id=payload.pga_certification_id,
            image=payload.image,
            specialties=payload.specialties,
            tools=payload.tools,
            certifications=payload.certifications,
            videos=[v.model_dump() for v in payload.videos],
            timezone=payload.timezone,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.get("/me", response_model=CoachResponse)
async def get_my_coach_profile(
    principal: AuthenticatedUser = Depends(get_current_principal),
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(coach_service.get_own_profile, principal)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.put("/me", response_model=CoachResponse)
async def update_my_coach_profile(
    payload: CoachProfileUpdate,
    principal: AuthenticatedUser = Depends(get_current_principal),
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachResponse:
    """Partial update; lists that are sent replace the stored ones."""
    try:
        coach = await asyncio.to_thread(
            coach_service.update_own_profile,
            principal,
            **payload.model_dump(exclude_unset=True),
        )
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.get("/{coach_id}", response_model=CoachResponse)
async def get_coach(
    coach_id: str,
    principal: Optional[AuthenticatedUser] = Depends(get_optional_principal),
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(coach_service.get_coach, coach_id, principal)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.put("/{coach_id}", response_model=CoachResponse)
async def update_coach(
    coach_id: str,
    payload: CoachProfileUpdate,
    principal: AuthenticatedUser = Depends(get_current_principal),
    coach_service: CoachService = Depends(get_coach_service),
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(
            coach_service.update_coach,
            principal,
            coach_id,
            **payload.model_dump(exclude_unset=True),
        )
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.get("/{coach_id}/available-times", response_model=AvailableTimesResponse)
async def get_available_times(
    coach_id: str,
    on_date: date = Query(..., alias="date"),
    booking_service: BookingService = Depends(get_booking_service),
) -> AvailableTimesResponse:
    try:
        times = await asyncio.to_thread(booking_service.get_available_times, coach_id, on_date)
    except DomainException as e:
        handle_domain_exception(e)
    return AvailableTimesResponse(coach_id=coach_id, date=on_date, times=times)
