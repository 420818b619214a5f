from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.service import CatalogItem

# Navigation targets that are not real categories
HOME = "HOME"
SETTINGS = "SETTINGS"
PSEUDO_CATEGORIES = frozenset({HOME, SETTINGS})


class SortOption(str, Enum):
    NEWEST = "newest"
    POPULARITY_DESC = "popularity-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class EmptyReason(str, Enum):
    SELECT_SUBCATEGORY = "select_subcategory"
    NO_MATCHES = "no_matches"


def parse_price_bound(value: str) -> Optional[Decimal]:
    """Empty input means "no bound"."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        bound = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Invalid price bound: {value!r}")
    if not bound.is_finite():
        raise ValueError(f"Invalid price bound: {value!r}")
    return bound


class CatalogState(BaseModel):
    """Snapshot of every input the catalog filter depends on."""

    model_config = ConfigDict(frozen=True)

    active_category: str = HOME
    subcategory_path: tuple[str, ...] = Field(default=(), max_length=2)
    search_query: str = ""
    search_global: bool = False
    price_min: str = ""
    price_max: str = ""
    sort: SortOption = SortOption.NEWEST
    favorites_only: bool = False
    admin_mode: bool = False

    @field_validator("price_min", "price_max")
    @classmethod
    def validate_price_bound(cls, v: str) -> str:
        parse_price_bound(v)
        return v

    @property
    def min_price(self) -> Decimal:
        return parse_price_bound(self.price_min) or Decimal("0")

    @property
    def max_price(self) -> Optional[Decimal]:
        return parse_price_bound(self.price_max)

    @property
    def has_search(self) -> bool:
        return bool(self.search_query.strip())


# Reducer actions
class SelectCategory(BaseModel):
    type: Literal["select_category"] = "select_category"
    category_id: str


class SelectSubcategory(BaseModel):
    type: Literal["select_subcategory"] = "select_subcategory"
    path: list[str] = Field(..., max_length=2)


class NavigateUp(BaseModel):
    type: Literal["navigate_up"] = "navigate_up"


class SetSearch(BaseModel):
    type: Literal["set_search"] = "set_search"
    query: str = ""


class SetGlobalSearch(BaseModel):
    type: Literal["set_global_search"] = "set_global_search"
    enabled: bool


class SetPriceRange(BaseModel):
    type: Literal["set_price_range"] = "set_price_range"
    min: str = ""
    max: str = ""


class SetSort(BaseModel):
    type: Literal["set_sort"] = "set_sort"
    sort: SortOption


class ShowFavorites(BaseModel):
    type: Literal["show_favorites"] = "show_favorites"
    enabled: bool = True


class SetAdminMode(BaseModel):
    type: Literal["set_admin_mode"] = "set_admin_mode"
    enabled: bool


class ClearFilters(BaseModel):
    type: Literal["clear_filters"] = "clear_filters"


CatalogAction = Annotated[
    Union[
        SelectCategory,
        SelectSubcategory,
        NavigateUp,
        SetSearch,
        SetGlobalSearch,
        SetPriceRange,
        SetSort,
        ShowFavorites,
        SetAdminMode,
        ClearFilters,
    ],
    Field(discriminator="type"),
]


class CatalogBrowseRequest(BaseModel):
    state: CatalogState = Field(default_factory=CatalogState)
    actions: list[CatalogAction] = Field(default_factory=list)


class CatalogView(BaseModel):
    state: CatalogState
    items: list[CatalogItem]
    total: int
    empty_reason: Optional[EmptyReason] = None
