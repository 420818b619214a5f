from sqlalchemy import (
    Column,
    String,
    DateTime,
    Text,
    ForeignKey,
    Numeric,
    CheckConstraint,
)
from app.core.database import Base, utcnow
import enum
import uuid


class OrderStatus(enum.Enum):
    PENDING_WHATSAPP = "pending_whatsapp"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return ORDER_STATUS_LABELS[self]


ORDER_STATUS_LABELS = {
    OrderStatus.PENDING_WHATSAPP: "Pending",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

# Statuses a customer may cancel from. Admin updates are not restricted.
CUSTOMER_CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING_WHATSAPP})

# Statuses counted as open work on the admin dashboard
OPEN_ORDER_STATUSES = frozenset({OrderStatus.PENDING_WHATSAPP, OrderStatus.CONFIRMED})


class Order(Base):
    """Customer order with a frozen snapshot of the purchased service."""

    __tablename__ = "orders"

    # Core identity
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    service_id = Column(
        String(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True
    )

    # Snapshot taken at creation; never rewritten afterwards
    service_name = Column(String(255), nullable=False)
    category = Column(String(64), nullable=False)
    subcategory = Column(String(64), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    fee_percent = Column(Numeric(5, 2), nullable=False, default=0)
    processing_fee = Column(Numeric(10, 2), nullable=False, default=0)

    # Customer details
    customer_info = Column(Text, nullable=False)
    customer_email = Column(String(255), nullable=True, index=True)
    customer_phone = Column(String(50), nullable=True)

    # Status management
    status = Column(
        String(20), nullable=False, default=OrderStatus.PENDING_WHATSAPP.value, index=True
    )
    internal_notes = Column(Text, nullable=True)

    # Audit timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_order_non_negative_price"),
    )

    @property
    def reference(self) -> str:
        """Short human-facing order reference."""
        return self.id[:8].upper()

    @property
    def total(self):
        return self.price + (self.processing_fee or 0)

    def can_be_cancelled_by_customer(self) -> bool:
        return OrderStatus(self.status) in CUSTOMER_CANCELLABLE_STATUSES

    def __repr__(self):
        return (
            f"<Order(id='{self.id}', service='{self.service_name}', "
            f"status='{self.status}', price={self.price})>"
        )
