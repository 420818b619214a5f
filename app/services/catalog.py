from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.service import ServiceItem
from app.schemas.catalog import (
    HOME,
    PSEUDO_CATEGORIES,
    CatalogAction,
    CatalogState,
    CatalogView,
    ClearFilters,
    EmptyReason,
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
)
from app.schemas.review import RatingSummary
from app.schemas.service import CatalogItem, ServiceDetail
from app.schemas.service import Service as ServiceSchema
from app.services.category import CategoryTreeService
from app.services.favorite import FavoriteService
from app.services.review import ReviewService
from app.services.service import ServiceManagementService

logger = structlog.get_logger(__name__)

PROMOTION_LIMIT = 3
SIMILAR_LIMIT = 2


# Filtering


def _in_category_scope(service: Any, state: CatalogState) -> bool:
    if state.active_category in PSEUDO_CATEGORIES:
        return True
    if state.search_global and state.has_search:
        return True
    return service.category == state.active_category


def _in_subcategory_scope(service: Any, path: Sequence[str]) -> bool:
    if not path:
        return True
    if len(path) == 1:
        # Leaf-level services are listed under their leaf only
        return service.subcategory == path[0] and not service.second_subcategory_id
    return service.subcategory == path[0] and service.second_subcategory_id == path[1]


def _matches_search(service: Any, query: str) -> bool:
    # The raw query is matched, surrounding spaces included
    needle = query.lower()
    if not needle:
        return True
    return needle in (service.name or "").lower() or needle in (
        service.description or ""
    ).lower()


def _in_price_range(service: Any, minimum: Decimal, maximum: Optional[Decimal]) -> bool:
    price = Decimal(service.price)
    if price < minimum:
        return False
    return maximum is None or price <= maximum


def _created_key(service: Any) -> datetime:
    created_at = service.created_at
    if created_at is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


def _name_key(service: Any) -> tuple[str, str]:
    name = service.name or ""
    return name.casefold(), name


SORT_KEYS: dict[SortOption, tuple[Callable[[Any], Any], bool]] = {
    SortOption.NEWEST: (_created_key, True),
    SortOption.POPULARITY_DESC: (lambda s: s.popularity or 0, True),
    SortOption.PRICE_ASC: (lambda s: Decimal(s.price), False),
    SortOption.PRICE_DESC: (lambda s: Decimal(s.price), True),
    SortOption.NAME_ASC: (_name_key, False),
    SortOption.NAME_DESC: (_name_key, True),
}


def sort_services(services: Iterable[Any], sort: SortOption) -> list[Any]:
    """Stable sort; ties keep their input order in both directions."""
    key, reverse = SORT_KEYS[SortOption(sort)]
    return sorted(services, key=key, reverse=reverse)


def filter_services(
    services: Iterable[Any],
    state: CatalogState,
    favorite_ids: Optional[Iterable[str]] = None,
) -> list[Any]:
    """Visible services for a catalog state, sorted.

    Pure and deterministic: the same inputs always give the same ordered
    output. Works on ORM rows and on schema objects alike.
    """
    favorites = frozenset(favorite_ids or ())
    minimum = state.min_price
    maximum = state.max_price
    path = state.subcategory_path

    visible = [
        service
        for service in services
        if (service.active or state.admin_mode)
        and _in_category_scope(service, state)
        and _in_subcategory_scope(service, path)
        and _matches_search(service, state.search_query)
        and _in_price_range(service, minimum, maximum)
        and (not state.favorites_only or service.id in favorites)
    ]
    return sort_services(visible, state.sort)


def empty_reason(
    state: CatalogState, categories: Iterable[Any], result_size: int
) -> Optional[EmptyReason]:
    """Why a filtered list is empty, or None when it is not."""
    if result_size:
        return None

    browsing_tree = (
        state.active_category not in PSEUDO_CATEGORIES
        and not state.favorites_only
        and not (state.search_global and state.has_search)
    )
    if browsing_tree:
        category = next((c for c in categories if c.id == state.active_category), None)
        if category is not None:
            path = state.subcategory_path
            if not path and category.subcategories:
                return EmptyReason.SELECT_SUBCATEGORY
            if len(path) == 1:
                subcategory = next(
                    (s for s in category.subcategories if s.id == path[0]), None
                )
                if subcategory is not None and subcategory.second_subcategories:
                    return EmptyReason.SELECT_SUBCATEGORY

    return EmptyReason.NO_MATCHES


def promotions(services: Iterable[Any], limit: int = PROMOTION_LIMIT) -> list[Any]:
    """Active services with a running discount or a badge, in input order."""
    return [
        s for s in services if s.active and (s.has_active_discount or s.badge_label)
    ][:limit]


def similar(services: Iterable[Any], service: Any, limit: int = SIMILAR_LIMIT) -> list[Any]:
    """Other active services of the same category, in input order."""
    return [
        s
        for s in services
        if s.active and s.category == service.category and s.id != service.id
    ][:limit]


# State transitions


def _evolve(state: CatalogState, **changes: Any) -> CatalogState:
    return CatalogState.model_validate({**state.model_dump(), **changes})


def reduce_catalog_state(state: CatalogState, action: CatalogAction) -> CatalogState:
    """Apply one navigation or filter action and return the new state."""
    if isinstance(action, SelectCategory):
        return _evolve(
            state,
            active_category=action.category_id,
            subcategory_path=(),
            search_query="",
            # Global search survives only while a query was being typed
            search_global=state.search_global and state.has_search,
            favorites_only=False,
        )
    if isinstance(action, SelectSubcategory):
        return _evolve(state, subcategory_path=tuple(action.path))
    if isinstance(action, NavigateUp):
        if state.subcategory_path:
            return _evolve(state, subcategory_path=state.subcategory_path[:-1])
        return _evolve(state, active_category=HOME)
    if isinstance(action, SetSearch):
        return _evolve(state, search_query=action.query)
    if isinstance(action, SetGlobalSearch):
        return _evolve(state, search_global=action.enabled)
    if isinstance(action, SetPriceRange):
        return _evolve(state, price_min=action.min, price_max=action.max)
    if isinstance(action, SetSort):
        return _evolve(state, sort=action.sort)
    if isinstance(action, ShowFavorites):
        if action.enabled:
            return _evolve(
                state, favorites_only=True, active_category=HOME, subcategory_path=()
            )
        return _evolve(state, favorites_only=False)
    if isinstance(action, SetAdminMode):
        return _evolve(state, admin_mode=action.enabled)
    if isinstance(action, ClearFilters):
        return _evolve(
            state,
            search_query="",
            search_global=False,
            price_min="",
            price_max="",
            favorites_only=False,
        )
    raise ValueError(f"Unknown catalog action: {action!r}")


def reduce_all(state: CatalogState, actions: Iterable[CatalogAction]) -> CatalogState:
    for action in actions:
        state = reduce_catalog_state(state, action)
    return state


# Loading


def to_catalog_item(
    service: ServiceItem,
    ratings: dict[str, RatingSummary],
    favorite_ids: Iterable[str],
) -> CatalogItem:
    rating = ratings.get(service.id, RatingSummary())
    item = CatalogItem.model_validate(service)
    return item.model_copy(
        update={
            "rating_average": rating.average,
            "rating_count": rating.count,
            "is_favorite": service.id in favorite_ids,
        }
    )


class CatalogService:
    """Loads services with their augmentations and runs the filter engine."""

    @staticmethod
    async def load_catalog(db: AsyncSession, owner_key: Optional[str]) -> list[CatalogItem]:
        """Every service, newest first, with rating and favorite flags."""
        services = await ServiceManagementService.get_services(db)
        ratings = await ReviewService.get_rating_summaries(db)
        favorite_ids = await FavoriteService.get_favorite_ids(db, owner_key)
        return [to_catalog_item(s, ratings, favorite_ids) for s in services]

    @staticmethod
    async def browse(
        db: AsyncSession,
        state: CatalogState,
        owner_key: Optional[str],
        actions: Iterable[CatalogAction] = (),
    ) -> CatalogView:
        state = reduce_all(state, actions)
        items = await CatalogService.load_catalog(db, owner_key)
        favorite_ids = {item.id for item in items if item.is_favorite}
        visible = filter_services(items, state, favorite_ids)
        categories = await CategoryTreeService.get_categories(db)

        logger.debug(
            "Catalog browsed",
            active_category=state.active_category,
            path=list(state.subcategory_path),
            results=len(visible),
        )
        return CatalogView(
            state=state,
            items=visible,
            total=len(visible),
            empty_reason=empty_reason(state, categories, len(visible)),
        )

    @staticmethod
    async def get_promotions(db: AsyncSession, owner_key: Optional[str]) -> list[CatalogItem]:
        items = await CatalogService.load_catalog(db, owner_key)
        return promotions(items)

    @staticmethod
    async def get_service_detail(
        db: AsyncSession, service_id: str, owner_key: Optional[str], admin_mode: bool = False
    ) -> Optional[ServiceDetail]:
        """A service with its similar services; inactive ones only for admins."""
        items = await CatalogService.load_catalog(db, owner_key)
        item = next((i for i in items if i.id == service_id), None)
        if item is None or (not item.active and not admin_mode):
            return None

        return ServiceDetail(
            service=item,
            similar=[
                ServiceSchema.model_validate(s.model_dump()) for s in similar(items, item)
            ],
        )
