from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ContactSettings(BaseModel):
    whatsapp_number: str = Field(..., min_length=3, max_length=32, pattern=r"^\+?[0-9]+$")


class FavoriteToggleResult(BaseModel):
    service_id: str
    is_favorite: bool


class FavoriteList(BaseModel):
    service_ids: list[str]


class TopService(BaseModel):
    name: str
    count: int


class CategoryShare(BaseModel):
    category: str
    count: int
    percentage: int


class DashboardStats(BaseModel):
    total_revenue: Decimal
    total_orders: int
    pending_orders: int
    active_services: int
    top_services: list[TopService]
    category_stats: list[CategoryShare]


class CustomerSummary(BaseModel):
    """A registered user or a guest known only from order emails."""

    user_id: Optional[str] = None
    email: str
    name: str
    phone: Optional[str] = None
    role: str
    provider: Optional[str] = None
    is_registered: bool
    order_count: int = 0
    total_spent: Decimal = Decimal("0")
    last_activity: Optional[datetime] = None
