# backend/app/routes/v1/admin.py
"""
Admin routes.

Endpoints under /api/admin (administrators only):
    GET /coaches/pending               -> Coaches awaiting approval
    GET /coaches                       -> All coaches, optionally by status
    POST /coaches/{coach_id}/approve   -> Approve a coach
    POST /coaches/{coach_id}/reject    -> Reject a coach
    DELETE /coaches/{coach_id}         -> Delete a coach account
    GET /students                      -> All students
    DELETE /students/{student_id}      -> Delete a student account
    GET /bookings                      -> All bookings, optionally by status
    GET /actions                       -> Admin audit log
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_admin_service
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.exceptions import DomainException
from ...principal import AuthenticatedUser
from ...schemas.admin import (
    AdminActionListResponse,
    AdminActionResponse,
    AdminBookingListResponse,
    CoachListResponse,
    CoachRejectRequest,
    DeleteResponse,
    StudentListResponse,
    StudentResponse,
)
from ...schemas.booking import BookingResponse
from ...schemas.coach import CoachResponse
from ...services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/coaches/pending", response_model=CoachListResponse)
async def list_pending_coaches(
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> CoachListResponse:
    try:
        coaches = await asyncio.to_thread(admin_service.list_pending_coaches, admin)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachListResponse(coaches=[CoachResponse.from_profile(c) for c in coaches])


@router.get("/coaches", response_model=CoachListResponse)
async def list_all_coaches(
    approval_status: Optional[str] = Query(None, alias="status"),
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> CoachListResponse:
    try:
        coaches = await asyncio.to_thread(admin_service.list_coaches, admin, approval_status)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachListResponse(coaches=[CoachResponse.from_profile(c) for c in coaches])


@router.post("/coaches/{coach_id}/approve", response_model=CoachResponse)
async def approve_coach(
    coach_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(admin_service.approve_coach, admin, coach_id)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.post("/coaches/{coach_id}/reject", response_model=CoachResponse)
async def reject_coach(
    coach_id: str,
    payload: Optional[CoachRejectRequest] = Body(None),
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> CoachResponse:
    reason = payload.reason if payload else None
    try:
        coach = await asyncio.to_thread(admin_service.reject_coach, admin, coach_id, reason)
    except DomainException as e:
        handle_domain_exception(e)
    return CoachResponse.from_profile(coach)


@router.delete("/coaches/{coach_id}", response_model=DeleteResponse)
async def delete_coach(
    coach_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> DeleteResponse:
    try:
        await asyncio.to_thread(admin_service.delete_coach, admin, coach_id)
    except DomainException as e:
        handle_domain_exception(e)
    return DeleteResponse(id=coach_id)


@router.get("/students", response_model=StudentListResponse)
async def list_students(
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> StudentListResponse:
    try:
        students = await asyncio.to_thread(admin_service.list_students, admin)
    except DomainException as e:
        handle_domain_exception(e)
    return StudentListResponse(students=[StudentResponse.from_profile(s) for s in students])


@router.delete("/students/{student_id}", response_model=DeleteResponse)
async def delete_student(
    student_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> DeleteResponse:
    try:
        await asyncio.to_thread(admin_service.delete_student, admin, student_id)
    except DomainException as e:
        handle_domain_exception(e)
    return DeleteResponse(id=student_id)


@router.get("/bookings", response_model=AdminBookingListResponse)
async def list_bookings(
    booking_status: Optional[str] = Query(None, alias="status"),
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminBookingListResponse:
    try:
        bookings = await asyncio.to_thread(admin_service.list_bookings, admin, booking_status)
    except DomainException as e:
        handle_domain_exception(e)
    return AdminBookingListResponse(bookings=[BookingResponse.from_booking(b) for b in bookings])


@router.get("/actions", response_model=AdminActionListResponse)
async def list_admin_actions(
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    admin: AuthenticatedUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminActionListResponse:
    try:
        actions = await asyncio.to_thread(admin_service.list_actions, admin, limit)
    except DomainException as e:
        handle_domain_exception(e)
    return AdminActionListResponse(
        actions=[AdminActionResponse.model_validate(a) for a in actions]
    )
