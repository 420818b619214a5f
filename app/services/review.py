from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.review import Review
from app.models.service import ServiceItem
from app.models.user import User
from app.schemas.review import RatingSummary, ReviewCreate

logger = structlog.get_logger(__name__)


def summarize_ratings(total: int, count: int) -> RatingSummary:
    """Mean rounded half-up to one decimal; no reviews means no rating."""
    if not count:
        return RatingSummary(average=None, count=0)
    average = (Decimal(total) / Decimal(count)).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    return RatingSummary(average=float(average), count=count)


class ReviewService:
    """Reviews and per-service rating aggregates."""

    @staticmethod
    async def get_reviews(db: AsyncSession, service_id: str) -> list[Review]:
        """Reviews of a service, newest first."""
        stmt = (
            select(Review)
            .where(Review.service_id == service_id)
            .order_by(Review.created_at.desc(), Review.id)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def add_review(
        db: AsyncSession, service_id: str, user: User, review_data: ReviewCreate
    ) -> Review:
        """Post a review. The author name is copied at submission time."""
        if not await db.get(ServiceItem, service_id):
            raise NotFoundError("Service not found")

        review = Review(
            service_id=service_id,
            user_id=user.id,
            user_name=user.name,
            rating=review_data.rating,
            comment=review_data.comment,
        )
        db.add(review)
        await db.commit()
        await db.refresh(review)

        logger.info(
            "Review added",
            review_id=review.id,
            service_id=service_id,
            user_id=user.id,
            rating=review.rating,
        )
        return review

    @staticmethod
    async def get_rating_summary(db: AsyncSession, service_id: str) -> RatingSummary:
        summaries = await ReviewService.get_rating_summaries(db, [service_id])
        return summaries.get(service_id, RatingSummary())

    @staticmethod
    async def get_rating_summaries(
        db: AsyncSession, service_ids: Optional[Iterable[str]] = None
    ) -> dict[str, RatingSummary]:
        """Rating summary per service id; services without reviews are absent."""
        stmt = select(
            Review.service_id, func.sum(Review.rating), func.count(Review.id)
        ).group_by(Review.service_id)
        if service_ids is not None:
            stmt = stmt.where(Review.service_id.in_(list(service_ids)))

        result = await db.execute(stmt)
        return {
            service_id: summarize_ratings(int(total or 0), int(count))
            for service_id, total, count in result.all()
        }
