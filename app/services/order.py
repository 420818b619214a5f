from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    OrderFormError,
    PermissionDeniedError,
)
from app.models.order import Order, OrderStatus
from app.models.service import ServiceItem
from app.models.user import User
from app.schemas.order import (
    HandoffPayload,
    OrderForm,
    OrderStatusUpdate,
    SupportRequest,
)
from app.services.category import CategoryTreeService
from app.services.handoff import build_handoff, build_support_request
from app.services.notification import deliver_order_handoff
from app.services.settings import GlobalSettingsService
from app.utils.validation import validate_order_form

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def compute_processing_fee(price: Decimal, fee_percent: Decimal) -> Decimal:
    return (Decimal(price) * Decimal(fee_percent) / 100).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


class OrderService:
    """Order lifecycle: checkout, customer cancellation and admin status updates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self, form: OrderForm, user: Optional[User] = None
    ) -> tuple[Order, HandoffPayload]:
        """Create an order from a checkout form and build its hand-off message.

        Nothing is persisted when the form is invalid. The order is
        committed before the hand-off is dispatched, so a failing
        notification never removes it.
        """
        errors = validate_order_form(
            form.email, form.phone, form.details, form.terms_accepted
        )
        if errors:
            logger.info(
                "Order form rejected", service_id=form.service_id, fields=sorted(errors)
            )
            raise OrderFormError(errors)

        service = await self.db.get(ServiceItem, form.service_id)
        if not service:
            raise NotFoundError("Service not found")
        if not service.active:
            raise ConflictError("Service is not available for ordering")

        price = service.effective_price
        fee_percent = await CategoryTreeService.resolve_fee(
            self.db, service.subcategory, service.second_subcategory_id
        )
        email = form.email.strip()
        phone = form.phone.strip()
        details = form.details.strip()

        order = Order(
            user_id=user.id if user else None,
            service_id=service.id,
            service_name=service.name,
            category=service.category,
            subcategory=service.subcategory,
            price=price,
            currency=service.currency,
            fee_percent=fee_percent,
            processing_fee=compute_processing_fee(price, fee_percent),
            customer_info=f"Email: {email}\nPhone: {phone}\nDetails: {details}",
            customer_email=email,
            customer_phone=phone,
            status=OrderStatus.PENDING_WHATSAPP.value,
        )
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(
            "Order created",
            order_id=order.id,
            service_id=service.id,
            price=str(order.price),
            fee_percent=str(order.fee_percent),
            guest=user is None,
        )

        contact_number = await GlobalSettingsService.get_contact_number(self.db)
        handoff = build_handoff(
            order, service.has_active_discount, details, contact_number
        )
        self._dispatch_handoff(handoff)
        return order, handoff

    async def get_order(self, order_id: str) -> Optional[Order]:
        return await self.db.get(Order, order_id)

    async def cancel_order(
        self,
        order_id: str,
        user: Optional[User] = None,
        email: Optional[str] = None,
    ) -> Order:
        """Customer cancellation, allowed only while awaiting the hand-off."""
        order = await self.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        self._check_owner(order, user, email)

        if not order.can_be_cancelled_by_customer():
            raise ConflictError(
                f"Order cannot be cancelled once {OrderStatus(order.status).label.lower()}"
            )

        order.status = OrderStatus.CANCELLED.value
        await self.db.commit()
        await self.db.refresh(order)

        logger.info("Order cancelled by customer", order_id=order.id)
        return order

    async def update_status(
        self, order_id: str, update: OrderStatusUpdate
    ) -> tuple[Order, bool, str]:
        """Admin update. Any status may follow any other.

        Returns the order, whether the status changed and a message for
        the admin UI. Notes are left alone when none are sent.
        """
        order = await self.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        previous_status = OrderStatus(order.status)
        order.status = update.status.value
        if update.internal_notes is not None:
            order.internal_notes = update.internal_notes

        await self.db.commit()
        await self.db.refresh(order)

        status_changed = previous_status != update.status
        if status_changed:
            message = f"Order status updated to {update.status.label}"
        else:
            message = "Order details saved"

        logger.info(
            "Order updated by admin",
            order_id=order.id,
            previous_status=previous_status.value,
            status=order.status,
            status_changed=status_changed,
        )
        return order, status_changed, message

    async def list_for_customer(
        self, user: Optional[User] = None, email: Optional[str] = None
    ) -> list[Order]:
        """Orders of a signed-in user, or of a guest email. Never both."""
        if user:
            condition = Order.user_id == user.id
        elif email and email.strip():
            condition = func.lower(Order.customer_email) == email.strip().lower()
        else:
            return []

        result = await self.db.execute(
            select(Order).where(condition).order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(
        self, query: Optional[str] = None, status: Optional[OrderStatus] = None
    ) -> list[Order]:
        """Admin listing; ``query`` matches an id prefix, service name or email."""
        stmt = select(Order)
        if query and query.strip():
            term = query.strip().lower()
            stmt = stmt.where(
                or_(
                    func.lower(Order.id).like(f"{term}%"),
                    func.lower(Order.service_name).like(f"%{term}%"),
                    func.lower(Order.customer_email).like(f"%{term}%"),
                )
            )
        if status is not None:
            stmt = stmt.where(Order.status == status.value)

        result = await self.db.execute(stmt.order_by(Order.created_at.desc()))
        return list(result.scalars().all())

    async def support_request(
        self,
        order_id: str,
        user: Optional[User] = None,
        email: Optional[str] = None,
    ) -> SupportRequest:
        order = await self.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        self._check_owner(order, user, email)

        contact_number = await GlobalSettingsService.get_contact_number(self.db)
        return build_support_request(order, contact_number)

    @staticmethod
    def _check_owner(order: Order, user: Optional[User], email: Optional[str]) -> None:
        if user and user.is_admin:
            return
        if user and order.user_id == user.id:
            return
        if (
            email
            and order.customer_email
            and email.strip().lower() == order.customer_email.lower()
        ):
            return
        raise PermissionDeniedError("You do not have access to this order")

    @staticmethod
    def _dispatch_handoff(handoff: HandoffPayload) -> None:
        try:
            deliver_order_handoff.delay(handoff.model_dump(mode="json"))
        except Exception as e:
            logger.warning(
                "Failed to dispatch order hand-off",
                order_reference=handoff.order_reference,
                error=str(e),
            )
