# backend/app/routes/v1/bookings.py
"""
Booking routes.

Endpoints under /api/bookings:
    POST /                    -> Create a pending booking (students)
    GET /my-bookings          -> Bookings where the caller is student or coach
    GET /{booking_id}         -> Booking detail (participants and admins)
    PATCH /{booking_id}/status -> Drive the status lifecycle
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_booking_service
from ...core.exceptions import DomainException
from ...principal import AuthenticatedUser
from ...schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# Static routes first so "/my-bookings" is not captured by "/{booking_id}"


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    principal: AuthenticatedUser = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            principal,
            coach_id=payload.coach_id,
            booking_date=payload.date,
            start_time=payload.time,
            duration_minutes=payload.duration,
            lesson_type=payload.lesson_type.value,
            location=payload.location,
            notes=payload.notes,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return BookingResponse.from_booking(booking)


@router.get("/my-bookings", response_model=BookingListResponse)
async def get_my_bookings(
    principal: AuthenticatedUser = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    try:
        bookings = await asyncio.to_thread(booking_service.list_bookings_for_user, principal)
    except DomainException as e:
        handle_domain_exception(e)
    return BookingListResponse(bookings=[BookingResponse.from_booking(b) for b in bookings])


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    principal: AuthenticatedUser = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, principal, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return BookingResponse.from_booking(booking)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    principal: AuthenticatedUser = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Change a booking's status.

    409 for transitions outside the lifecycle, 403 when the caller's role may
    not drive the transition.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.update_booking_status, principal, booking_id, payload.status
        )
    except DomainException as e:
        handle_domain_exception(e)
    return BookingResponse.from_booking(booking)
