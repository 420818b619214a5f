from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StorefrontError
from app.models.review import Review
from app.schemas.review import ReviewCreate
from app.services.favorite import FavoriteService, favorite_owner_key
from app.services.review import ReviewService, summarize_ratings
from tests.fixtures.catalog_fixtures import BASE_TIME


class TestRatingSummary:
    """Test rating aggregation."""

    def test_no_reviews_means_no_rating(self):
        summary = summarize_ratings(0, 0)

        assert summary.average is None
        assert summary.count == 0

    @pytest.mark.parametrize(
        "total,count,expected",
        [(5, 1, 5.0), (9, 2, 4.5), (13, 3, 4.3), (17, 4, 4.3), (11, 3, 3.7)],
    )
    def test_average_rounded_to_one_decimal(self, total, count, expected):
        assert summarize_ratings(total, count).average == expected


class TestReviewService:
    """Test review business logic."""

    async def test_add_and_list_reviews(
        self, db: AsyncSession, sample_services, customer_user
    ):
        service_id = sample_services["boost"].id
        db.add(
            Review(
                service_id=service_id,
                user_id=customer_user.id,
                user_name="Jane Doe",
                rating=3,
                comment="ok",
                created_at=BASE_TIME - timedelta(days=1),
            )
        )
        await db.commit()

        review = await ReviewService.add_review(
            db, service_id, customer_user, ReviewCreate(rating=5, comment="Great")
        )

        assert review.user_name == "Jane Doe"
        reviews = await ReviewService.get_reviews(db, service_id)
        assert [r.rating for r in reviews] == [5, 3]

    async def test_same_user_may_review_twice(
        self, db: AsyncSession, sample_services, customer_user
    ):
        service_id = sample_services["boost"].id
        for rating in (4, 5):
            await ReviewService.add_review(
                db, service_id, customer_user, ReviewCreate(rating=rating)
            )

        summary = await ReviewService.get_rating_summary(db, service_id)
        assert summary.count == 2
        assert summary.average == 4.5

    async def test_summaries_per_service(
        self, db: AsyncSession, sample_services, customer_user
    ):
        boost = sample_services["boost"].id
        esim = sample_services["esim_a"].id
        for service_id, rating in ((boost, 4), (boost, 3), (esim, 5)):
            await ReviewService.add_review(
                db, service_id, customer_user, ReviewCreate(rating=rating)
            )

        summaries = await ReviewService.get_rating_summaries(db)

        assert summaries[boost].average == 3.5
        assert summaries[esim].count == 1
        assert sample_services["esim_b"].id not in summaries

    async def test_review_unknown_service(self, db: AsyncSession, customer_user):
        with pytest.raises(NotFoundError):
            await ReviewService.add_review(
                db, "missing", customer_user, ReviewCreate(rating=4)
            )

    def test_rating_bounds(self):
        with pytest.raises(ValueError):
            ReviewCreate(rating=6)
        with pytest.raises(ValueError):
            ReviewCreate(rating=0)


class TestFavoriteService:
    """Test favorite toggling."""

    async def test_toggle_twice_restores_membership(
        self, db: AsyncSession, sample_services, customer_user
    ):
        owner = favorite_owner_key(customer_user)
        service_id = sample_services["esim_a"].id

        assert await FavoriteService.toggle_favorite(db, owner, service_id) is True
        assert await FavoriteService.get_favorite_ids(db, owner) == {service_id}

        assert await FavoriteService.toggle_favorite(db, owner, service_id) is False
        assert await FavoriteService.get_favorite_ids(db, owner) == set()

    async def test_guest_and_user_sets_are_separate(
        self, db: AsyncSession, sample_services, customer_user
    ):
        service_id = sample_services["esim_a"].id
        guest = favorite_owner_key(None, "session-a1")
        await FavoriteService.toggle_favorite(db, guest, service_id)

        assert guest == "guest:session-a1"
        assert favorite_owner_key(customer_user, "session-a1") == customer_user.id
        assert await FavoriteService.get_favorite_ids(db, customer_user.id) == set()
        assert await FavoriteService.get_favorite_ids(db, guest) == {service_id}

    async def test_guest_sessions_are_separate(self, db: AsyncSession, sample_services):
        service_id = sample_services["esim_a"].id
        first = favorite_owner_key(None, "session-a1")
        second = favorite_owner_key(None, "session-b2")

        await FavoriteService.toggle_favorite(db, first, service_id)

        assert await FavoriteService.get_favorite_ids(db, first) == {service_id}
        assert await FavoriteService.get_favorite_ids(db, second) == set()

    async def test_guest_without_session(self, db: AsyncSession, sample_services):
        """No session id means no favorite set to read or change."""
        assert favorite_owner_key(None) is None
        assert await FavoriteService.get_favorite_ids(db, None) == set()

        with pytest.raises(StorefrontError):
            await FavoriteService.toggle_favorite(db, None, sample_services["esim_a"].id)

    async def test_toggle_unknown_service(self, db: AsyncSession):
        with pytest.raises(NotFoundError):
            await FavoriteService.toggle_favorite(db, "guest:session-a1", "missing")
