from decimal import Decimal

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    Boolean,
    ForeignKey,
    Numeric,
)
from app.core.database import Base, utcnow
import uuid


class ServiceItem(Base):
    """Catalog item with list price, optional promotion and tree placement."""

    __tablename__ = "services"

    # Core identity
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Placement in the category tree
    category = Column(String(64), ForeignKey("categories.id"), nullable=False, index=True)
    subcategory = Column(String(64), ForeignKey("subcategories.id"), nullable=True)
    second_subcategory_id = Column(
        String(64), ForeignKey("second_subcategories.id"), nullable=True
    )

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)
    promo_price = Column(Numeric(10, 2), nullable=True)
    badge_label = Column(String(100), nullable=True)  # Marketing tag, e.g. "50% OFF"
    currency = Column(String(10), nullable=False, default="TND")

    # Customer-facing terms
    conditions = Column(Text, nullable=False, default="")
    required_info = Column(Text, nullable=False, default="")

    # Catalog behavior
    active = Column(Boolean, default=True, nullable=False)
    popularity = Column(Integer, default=0, nullable=False)

    # Audit timestamps (created_at is the recency sort key)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    @property
    def has_active_discount(self) -> bool:
        """A promotion applies only when it undercuts the list price."""
        return self.promo_price is not None and self.promo_price < self.price

    @property
    def effective_price(self) -> Decimal:
        return self.promo_price if self.has_active_discount else self.price

    def __repr__(self):
        return (
            f"<ServiceItem(id='{self.id}', name='{self.name}', "
            f"category='{self.category}', price={self.price})>"
        )
