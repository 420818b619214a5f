"""Messages handed to the external messaging channel.

The customer finishes a purchase by sending a prefilled chat message to
the store's contact number. These helpers build that text and the
click-to-chat link; nothing here talks to the network.
"""
from decimal import Decimal
from urllib.parse import quote

from app.core.config import settings
from app.models.order import Order
from app.schemas.order import HandoffPayload, SupportRequest


def chat_url(contact_number: str, message: str) -> str:
    number = contact_number.lstrip("+")
    return f"{settings.HANDOFF_BASE_URL}/{number}?text={quote(message, safe='')}"


def _money(amount: Decimal, currency: str) -> str:
    return f"{Decimal(amount):.2f} {currency}"


def build_order_message(order: Order, is_promo: bool, details: str) -> str:
    price_line = _money(order.price, order.currency)
    if is_promo:
        price_line += " (Promo)"

    lines = [
        f"*New Order Request #{order.reference}*",
        f"*Date:* {order.created_at:%d/%m/%Y %H:%M}",
        "",
        f"*Service:* {order.service_name}",
        f"*Category:* {order.category}",
        f"*Price:* {price_line}",
    ]
    if order.processing_fee:
        lines.append(
            f"*Processing fee ({order.fee_percent}%):* "
            f"{_money(order.processing_fee, order.currency)}"
        )
        lines.append(f"*Total:* {_money(order.total, order.currency)}")
    lines += [
        "",
        "*Customer Information:*",
        "------------------",
        f"*Email:* {order.customer_email}",
        f"*Phone:* {order.customer_phone}",
        f"*Required Details:* {details}",
        "",
        f"_Sent via {settings.STORE_NAME}_",
    ]
    return "\n".join(lines)


def build_handoff(
    order: Order, is_promo: bool, details: str, contact_number: str
) -> HandoffPayload:
    message = build_order_message(order, is_promo, details)
    return HandoffPayload(
        order_reference=order.reference,
        order_date=f"{order.created_at:%d/%m/%Y %H:%M}",
        service_name=order.service_name,
        category=order.category,
        price=order.price,
        processing_fee=order.processing_fee,
        total=order.total,
        currency=order.currency,
        is_promo=is_promo,
        customer_email=order.customer_email or "",
        customer_phone=order.customer_phone or "",
        details=details,
        message=message,
        url=chat_url(contact_number, message),
    )


def build_support_request(order: Order, contact_number: str) -> SupportRequest:
    message = (
        f"Hello, I need assistance regarding my order #{order.reference} "
        f"for {order.service_name}."
    )
    return SupportRequest(
        order_reference=order.reference,
        message=message,
        url=chat_url(contact_number, message),
    )
