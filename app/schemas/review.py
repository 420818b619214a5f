from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)


class Review(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    service_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    created_at: datetime


class RatingSummary(BaseModel):
    """``average`` is None when a service has no reviews yet."""

    average: Optional[float] = None
    count: int = 0


class ServiceReviews(BaseModel):
    summary: RatingSummary
    reviews: list[Review]
