# backend/app/routes/v1/reviews.py
"""
Review routes.

Endpoints under /api/reviews:
    POST /                   -> Review a completed booking (student only)
    GET /coach/{coach_id}    -> A coach's reviews, newest first
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_review_service
from ...core.exceptions import DomainException
from ...principal import AuthenticatedUser
from ...schemas.review import ReviewCreate, ReviewResponse
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    principal: AuthenticatedUser = Depends(get_current_principal),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await asyncio.to_thread(
            review_service.create_review,
            principal,
            payload.booking_id,
            payload.rating,
            payload.comment,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ReviewResponse.model_validate(review)


@router.get("/coach/{coach_id}", response_model=List[ReviewResponse])
async def list_coach_reviews(
    coach_id: str,
    review_service: ReviewService = Depends(get_review_service),
) -> List[ReviewResponse]:
    try:
        reviews = await asyncio.to_thread(review_service.list_reviews_for_coach, coach_id)
    except DomainException as e:
        handle_domain_exception(e)
    return [ReviewResponse.model_validate(r) for r in reviews]
