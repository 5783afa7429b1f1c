# backend/app/schemas/review.py
"""Review schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel


class ReviewCreate(StrictRequestModel):
    booking_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(StrictModel):
    id: str
    booking_id: str
    coach_id: str
    student_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime
