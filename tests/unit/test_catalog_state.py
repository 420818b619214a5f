from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from app.schemas.catalog import (
    HOME,
    CatalogAction,
    CatalogState,
    ClearFilters,
    NavigateUp,
    SelectCategory,
    SelectSubcategory,
    SetAdminMode,
    SetGlobalSearch,
    SetPriceRange,
    SetSearch,
    SetSort,
    ShowFavorites,
    SortOption,
    parse_price_bound,
)
from app.services.catalog import reduce_all, reduce_catalog_state


class TestCatalogState:
    """Test catalog state validation."""

    def test_defaults(self):
        state = CatalogState()

        assert state.active_category == HOME
        assert state.subcategory_path == ()
        assert state.sort == SortOption.NEWEST
        assert state.min_price == Decimal("0")
        assert state.max_price is None

    def test_price_bounds_parse(self):
        state = CatalogState(price_min=" 12.5 ", price_max="99")

        assert state.min_price == Decimal("12.5")
        assert state.max_price == Decimal("99")

    def test_invalid_price_bound_rejected(self):
        with pytest.raises(ValidationError):
            CatalogState(price_min="cheap")

    @pytest.mark.parametrize("bound", ["NaN", "sNaN", "Infinity", "-inf"])
    def test_non_finite_price_bound_rejected(self, bound):
        with pytest.raises(ValidationError):
            CatalogState(price_min=bound)
        with pytest.raises(ValidationError):
            CatalogState(price_max=bound)
        with pytest.raises(ValueError):
            parse_price_bound(bound)

    def test_path_limited_to_two_levels(self):
        with pytest.raises(ValidationError):
            CatalogState(subcategory_path=("A", "B", "C"))

    def test_state_is_frozen(self):
        state = CatalogState()
        with pytest.raises(ValidationError):
            state.search_query = "x"

    def test_parse_price_bound_empty(self):
        assert parse_price_bound("") is None
        assert parse_price_bound("   ") is None

    def test_actions_parse_by_type(self):
        adapter = TypeAdapter(list[CatalogAction])

        actions = adapter.validate_python(
            [
                {"type": "select_category", "category_id": "GAMING"},
                {"type": "select_subcategory", "path": ["BOOSTS"]},
                {"type": "set_sort", "sort": "price-asc"},
            ]
        )

        assert isinstance(actions[0], SelectCategory)
        assert isinstance(actions[1], SelectSubcategory)
        assert actions[2].sort == SortOption.PRICE_ASC


class TestReduceCatalogState:
    """Test catalog state transitions."""

    def test_select_category_resets_navigation(self):
        state = CatalogState(
            active_category="GAMING",
            subcategory_path=("BOOSTS",),
            search_query="rank",
            favorites_only=True,
            sort=SortOption.PRICE_DESC,
        )

        new_state = reduce_catalog_state(state, SelectCategory(category_id="STREAMING"))

        assert new_state.active_category == "STREAMING"
        assert new_state.subcategory_path == ()
        assert new_state.search_query == ""
        assert new_state.favorites_only is False
        assert new_state.sort == SortOption.PRICE_DESC

    def test_select_category_keeps_global_search_only_while_searching(self):
        searching = CatalogState(search_query="netflix", search_global=True)
        idle = CatalogState(search_query="", search_global=True)

        assert reduce_catalog_state(
            searching, SelectCategory(category_id="GAMING")
        ).search_global
        assert not reduce_catalog_state(
            idle, SelectCategory(category_id="GAMING")
        ).search_global

    def test_select_subcategory_and_navigate_up(self):
        state = CatalogState(active_category="CONNECTIVITY")

        state = reduce_catalog_state(state, SelectSubcategory(path=["ESIM", "ESIM_PREMIUM"]))
        assert state.subcategory_path == ("ESIM", "ESIM_PREMIUM")

        state = reduce_catalog_state(state, NavigateUp())
        assert state.subcategory_path == ("ESIM",)

        state = reduce_catalog_state(state, NavigateUp())
        assert state.subcategory_path == ()
        assert state.active_category == "CONNECTIVITY"

        state = reduce_catalog_state(state, NavigateUp())
        assert state.active_category == HOME

    def test_show_favorites_jumps_home(self):
        state = CatalogState(active_category="GAMING", subcategory_path=("BOOSTS",))

        new_state = reduce_catalog_state(state, ShowFavorites())

        assert new_state.favorites_only is True
        assert new_state.active_category == HOME
        assert new_state.subcategory_path == ()

        assert reduce_catalog_state(new_state, ShowFavorites(enabled=False)).favorites_only is False

    def test_filter_actions(self):
        state = reduce_all(
            CatalogState(),
            [
                SetSearch(query="esim"),
                SetGlobalSearch(enabled=True),
                SetPriceRange(min="10", max="100"),
                SetSort(sort=SortOption.NAME_ASC),
                SetAdminMode(enabled=True),
            ],
        )

        assert state.search_query == "esim"
        assert state.search_global is True
        assert (state.min_price, state.max_price) == (Decimal("10"), Decimal("100"))
        assert state.sort == SortOption.NAME_ASC
        assert state.admin_mode is True

    def test_invalid_price_action_rejected(self):
        with pytest.raises(ValidationError):
            reduce_catalog_state(CatalogState(), SetPriceRange(min="abc"))

    def test_clear_filters_keeps_navigation(self):
        state = CatalogState(
            active_category="CONNECTIVITY",
            subcategory_path=("ESIM",),
            search_query="plan",
            search_global=True,
            price_min="5",
            price_max="50",
            favorites_only=True,
            sort=SortOption.PRICE_ASC,
        )

        cleared = reduce_catalog_state(state, ClearFilters())

        assert cleared.search_query == ""
        assert cleared.search_global is False
        assert (cleared.price_min, cleared.price_max) == ("", "")
        assert cleared.favorites_only is False
        assert cleared.active_category == "CONNECTIVITY"
        assert cleared.subcategory_path == ("ESIM",)
        assert cleared.sort == SortOption.PRICE_ASC

    def test_reducer_does_not_mutate_input(self):
        state = CatalogState(active_category="GAMING")

        reduce_catalog_state(state, SetSearch(query="x"))

        assert state.search_query == ""
