from decimal import Decimal
from urllib.parse import unquote

from app.models.order import Order, OrderStatus
from app.services.handoff import (
    build_handoff,
    build_order_message,
    build_support_request,
    chat_url,
)
from tests.fixtures.catalog_fixtures import BASE_TIME


def make_order(**overrides) -> Order:
    values = {
        "id": "3f2a9c1e-0000-4000-8000-000000000000",
        "service_name": "Global eSIM",
        "category": "CONNECTIVITY",
        "subcategory": "ESIM",
        "price": Decimal("119.00"),
        "currency": "TND",
        "fee_percent": Decimal("2.00"),
        "processing_fee": Decimal("2.38"),
        "customer_info": "",
        "customer_email": "buyer@example.com",
        "customer_phone": "+216 50 000 000",
        "status": OrderStatus.PENDING_WHATSAPP.value,
        "created_at": BASE_TIME,
    }
    values.update(overrides)
    return Order(**values)


class TestChatUrl:
    def test_strips_plus_and_encodes(self):
        url = chat_url("+21650123456", "Hi & bye #1")

        assert url == "https://wa.me/21650123456?text=Hi%20%26%20bye%20%231"


class TestOrderMessage:
    """Test the prefilled order message."""

    def test_message_lines(self):
        message = build_order_message(make_order(), is_promo=True, details="EID 8904")
        lines = message.split("\n")

        assert lines[0] == "*New Order Request #3F2A9C1E*"
        assert lines[1] == "*Date:* 15/01/2024 10:30"
        assert "*Service:* Global eSIM" in lines
        assert "*Category:* CONNECTIVITY" in lines
        assert "*Price:* 119.00 TND (Promo)" in lines
        assert "*Processing fee (2.00%):* 2.38 TND" in lines
        assert "*Total:* 121.38 TND" in lines
        assert "*Required Details:* EID 8904" in lines
        assert lines[-1] == "_Sent via ATLASVAULT_"

    def test_no_fee_lines_without_fee(self):
        order = make_order(fee_percent=Decimal("0"), processing_fee=Decimal("0"))

        message = build_order_message(order, is_promo=False, details="x")

        assert "*Price:* 119.00 TND" in message.split("\n")
        assert "Processing fee" not in message
        assert "*Total:*" not in message


class TestHandoffPayload:
    def test_payload_fields(self):
        payload = build_handoff(make_order(), True, "EID 8904", "15550199090")

        assert payload.order_reference == "3F2A9C1E"
        assert payload.order_date == "15/01/2024 10:30"
        assert payload.total == Decimal("121.38")
        assert payload.is_promo is True
        assert payload.customer_phone == "+216 50 000 000"
        assert payload.url.startswith("https://wa.me/15550199090?text=")
        assert unquote(payload.url.split("?text=", 1)[1]) == payload.message


class TestSupportRequest:
    def test_support_message(self):
        support = build_support_request(make_order(), "+15550199090")

        assert support.order_reference == "3F2A9C1E"
        assert support.message == (
            "Hello, I need assistance regarding my order #3F2A9C1E for Global eSIM."
        )
        assert unquote(support.url.split("?text=", 1)[1]) == support.message
