from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: str = Field(..., max_length=64)
    subcategory: Optional[str] = Field(None, max_length=64)
    second_subcategory_id: Optional[str] = Field(None, max_length=64)
    price: Decimal = Field(..., ge=0)
    promo_price: Optional[Decimal] = Field(None, ge=0)
    badge_label: Optional[str] = Field(None, max_length=100)
    currency: str = Field("TND", max_length=10)
    conditions: str = ""
    required_info: str = ""
    active: bool = True
    popularity: int = Field(0, ge=0)

    @model_validator(mode="after")
    def validate_leaf_has_parent(self):
        if self.second_subcategory_id and not self.subcategory:
            raise ValueError("second_subcategory_id requires a subcategory")
        return self


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=64)
    subcategory: Optional[str] = Field(None, max_length=64)
    second_subcategory_id: Optional[str] = Field(None, max_length=64)
    price: Optional[Decimal] = Field(None, ge=0)
    promo_price: Optional[Decimal] = Field(None, ge=0)
    badge_label: Optional[str] = Field(None, max_length=100)
    currency: Optional[str] = Field(None, max_length=10)
    conditions: Optional[str] = None
    required_info: Optional[str] = None
    active: Optional[bool] = None
    popularity: Optional[int] = Field(None, ge=0)


class Service(ServiceBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    effective_price: Decimal
    has_active_discount: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class CatalogItem(Service):
    """Service as shown in the catalog grid, with per-caller augmentations."""

    rating_average: Optional[float] = None
    rating_count: int = 0
    is_favorite: bool = False


class ServiceDetail(BaseModel):
    service: CatalogItem
    similar: list[Service] = Field(default_factory=list)
