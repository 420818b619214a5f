from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.catalog import (
    CatalogState,
    EmptyReason,
    SelectSubcategory,
    SetSearch,
    ShowFavorites,
)
from app.schemas.review import ReviewCreate
from app.services.catalog import CatalogService
from app.services.favorite import FavoriteService
from app.services.review import ReviewService

GUEST = "guest:tab-one-session"


def names(items) -> list[str]:
    return [item.name for item in items]


class TestCatalogBrowse:
    """Test catalog browsing against the database."""

    async def test_home_lists_active_services_newest_first(
        self, db: AsyncSession, sample_services
    ):
        view = await CatalogService.browse(db, CatalogState(), GUEST)

        assert names(view.items) == [
            "Global eSIM",
            "Europe eSIM",
            "Premium eSIM",
            "Rank Boost",
        ]
        assert view.total == 4
        assert view.empty_reason is None

    async def test_subcategory_excludes_leaf_services(
        self, db: AsyncSession, sample_services
    ):
        state = CatalogState(active_category="CONNECTIVITY")

        view = await CatalogService.browse(
            db, state, GUEST, [SelectSubcategory(path=["ESIM"])]
        )

        assert view.state.subcategory_path == ("ESIM",)
        assert names(view.items) == ["Global eSIM", "Europe eSIM"]

    async def test_leaf_lists_only_leaf_services(self, db: AsyncSession, sample_services):
        state = CatalogState(
            active_category="CONNECTIVITY", subcategory_path=("ESIM", "ESIM_PREMIUM")
        )

        view = await CatalogService.browse(db, state, GUEST)

        assert names(view.items) == ["Premium eSIM"]

    async def test_empty_reasons(self, db: AsyncSession, sample_services):
        empty_leaf = await CatalogService.browse(
            db,
            CatalogState(
                active_category="CONNECTIVITY", subcategory_path=("ESIM", "ESIM_BASIC")
            ),
            GUEST,
        )
        branch = await CatalogService.browse(
            db,
            CatalogState(active_category="CONNECTIVITY", subcategory_path=("ESIM",)),
            GUEST,
            [SetSearch(query="nothing like this")],
        )

        assert empty_leaf.items == []
        assert empty_leaf.empty_reason == EmptyReason.NO_MATCHES
        assert branch.empty_reason == EmptyReason.SELECT_SUBCATEGORY

    async def test_items_carry_rating_and_favorite(
        self, db: AsyncSession, sample_services, customer_user
    ):
        esim_a = sample_services["esim_a"]
        await ReviewService.add_review(db, esim_a.id, customer_user, ReviewCreate(rating=4))
        await FavoriteService.toggle_favorite(db, customer_user.id, esim_a.id)

        view = await CatalogService.browse(
            db, CatalogState(), customer_user.id, [ShowFavorites()]
        )

        assert names(view.items) == ["Global eSIM"]
        item = view.items[0]
        assert item.is_favorite is True
        assert item.rating_average == 4.0
        assert item.rating_count == 1

        guest_view = await CatalogService.browse(
            db, CatalogState(), GUEST, [ShowFavorites()]
        )
        assert guest_view.items == []
        assert guest_view.empty_reason == EmptyReason.NO_MATCHES

    async def test_admin_mode_shows_inactive(self, db: AsyncSession, sample_services):
        view = await CatalogService.browse(
            db, CatalogState(active_category="GAMING", admin_mode=True), GUEST
        )

        assert names(view.items) == ["Rank Boost", "Retired Boost"]


class TestCatalogDetail:
    async def test_promotions(self, db: AsyncSession, sample_services):
        items = await CatalogService.get_promotions(db, GUEST)

        assert names(items) == ["Global eSIM", "Rank Boost"]

    async def test_detail_with_similar(self, db: AsyncSession, sample_services):
        detail = await CatalogService.get_service_detail(
            db, sample_services["esim_a"].id, GUEST
        )

        assert detail.service.name == "Global eSIM"
        assert names(detail.similar) == ["Europe eSIM", "Premium eSIM"]

    async def test_inactive_detail_admin_only(self, db: AsyncSession, sample_services):
        hidden_id = sample_services["hidden"].id

        assert await CatalogService.get_service_detail(db, hidden_id, GUEST) is None
        detail = await CatalogService.get_service_detail(
            db, hidden_id, GUEST, admin_mode=True
        )
        assert detail.service.active is False

    async def test_unknown_detail(self, db: AsyncSession, sample_services):
        assert await CatalogService.get_service_detail(db, "missing", GUEST) is None
