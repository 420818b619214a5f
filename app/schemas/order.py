from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Import enums from the model to avoid duplication
from app.models.order import OrderStatus


class OrderForm(BaseModel):
    """Customer checkout form. Field checks happen in the order service so
    that every failing field can be reported at once."""

    service_id: str
    email: str = ""
    phone: str = ""
    details: str = ""
    terms_accepted: bool = False


class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reference: str
    user_id: Optional[str] = None
    service_id: Optional[str] = None
    service_name: str
    category: str
    subcategory: Optional[str] = None
    price: Decimal
    currency: str
    fee_percent: Decimal
    processing_fee: Decimal
    total: Decimal
    customer_info: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    internal_notes: Optional[str] = None


class HandoffPayload(BaseModel):
    """Order summary the customer forwards over the messaging channel."""

    order_reference: str
    order_date: str
    service_name: str
    category: str
    price: Decimal
    processing_fee: Decimal
    total: Decimal
    currency: str
    is_promo: bool
    customer_email: str
    customer_phone: str
    details: str
    message: str
    url: str


class OrderCreated(BaseModel):
    order: Order
    handoff: HandoffPayload


class OrderCancelRequest(BaseModel):
    email: Optional[str] = Field(
        None, description="Required for guest orders; must match the order email"
    )


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    internal_notes: Optional[str] = None


class OrderStatusUpdateResult(BaseModel):
    order: Order
    status_changed: bool
    message: str


class SupportRequest(BaseModel):
    order_reference: str
    message: str
    url: str
