# backend/app/routes/v1/students.py
"""
Student profile routes.

Endpoints under /api/students:
    GET /me   -> The calling student's profile
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies.auth import get_current_user
from ...models.user import User
from ...schemas.admin import StudentResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["students"])


@router.get("/me", response_model=StudentResponse)
async def get_my_student_profile(current_user: User = Depends(get_current_user)) -> StudentResponse:
    if current_user.student_profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Student not found", "code": "NotFoundException", "details": {}},
        )
    return StudentResponse.from_profile(current_user.student_profile)
