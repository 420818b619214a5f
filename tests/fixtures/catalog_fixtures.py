from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_password_hash
from app.models.category import Category, SecondSubcategory, Subcategory
from app.models.order import Order, OrderStatus
from app.models.service import ServiceItem
from app.models.user import AuthProvider, User, UserRole

BASE_TIME = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


def make_service(**overrides) -> ServiceItem:
    """Unsaved service with sensible defaults, for pure filter tests."""
    values = {
        "id": overrides.pop("id", None) or f"svc-{overrides.get('name', 'x')}",
        "name": "Sample Service",
        "description": "",
        "category": "GAMING",
        "subcategory": None,
        "second_subcategory_id": None,
        "price": Decimal("10.00"),
        "promo_price": None,
        "badge_label": None,
        "currency": "TND",
        "conditions": "",
        "required_info": "",
        "active": True,
        "popularity": 0,
        "created_at": BASE_TIME,
    }
    values.update(overrides)
    return ServiceItem(**values)


@pytest.fixture
async def sample_tree(db: AsyncSession) -> list[Category]:
    """CONNECTIVITY with a two-level branch, and GAMING with one subcategory."""
    connectivity = Category(
        id="CONNECTIVITY",
        label="Connectivity & Payments",
        label_fr="Connectivité & Paiements",
        icon="Globe",
        color="text-blue-500",
        order=1,
        subcategories=[
            Subcategory(
                id="ESIM",
                label="eSIMs",
                fee=Decimal("2.00"),
                order=1,
                second_subcategories=[
                    SecondSubcategory(
                        id="ESIM_PREMIUM",
                        label="Premium eSIMs",
                        fee=Decimal("5.00"),
                        order=1,
                    ),
                    SecondSubcategory(
                        id="ESIM_BASIC", label="Basic eSIMs", fee=Decimal("0"), order=2
                    ),
                ],
            ),
            Subcategory(
                id="VIRTUAL_NUMBERS",
                label="Virtual Numbers",
                fee=Decimal("0"),
                order=2,
            ),
        ],
    )
    gaming = Category(
        id="GAMING",
        label="Gaming Space",
        icon="Gamepad2",
        color="text-emerald-500",
        order=2,
        subcategories=[Subcategory(id="BOOSTS", label="Boosts", order=1)],
    )
    db.add_all([connectivity, gaming])
    await db.commit()
    return [connectivity, gaming]


@pytest.fixture
async def sample_services(db: AsyncSession, sample_tree) -> dict[str, ServiceItem]:
    """Services spread over the sample tree, keyed by a short name."""
    services = {
        "esim_a": ServiceItem(
            name="Global eSIM",
            description="Data in 140 countries",
            category="CONNECTIVITY",
            subcategory="ESIM",
            price=Decimal("135.00"),
            promo_price=Decimal("119.00"),
            popularity=92,
            created_at=BASE_TIME,
        ),
        "esim_b": ServiceItem(
            name="Europe eSIM",
            description="EU roaming",
            category="CONNECTIVITY",
            subcategory="ESIM",
            price=Decimal("60.00"),
            popularity=40,
            created_at=BASE_TIME - timedelta(minutes=1),
        ),
        "esim_premium": ServiceItem(
            name="Premium eSIM",
            description="Unlimited 5G",
            category="CONNECTIVITY",
            subcategory="ESIM",
            second_subcategory_id="ESIM_PREMIUM",
            price=Decimal("200.00"),
            popularity=10,
            created_at=BASE_TIME - timedelta(minutes=2),
        ),
        "boost": ServiceItem(
            name="Rank Boost",
            description="Reach the top",
            category="GAMING",
            subcategory="BOOSTS",
            price=Decimal("100.00"),
            promo_price=Decimal("80.00"),
            badge_label="HOT",
            popularity=45,
            created_at=BASE_TIME - timedelta(minutes=3),
        ),
        "hidden": ServiceItem(
            name="Retired Boost",
            description="No longer sold",
            category="GAMING",
            subcategory="BOOSTS",
            price=Decimal("50.00"),
            active=False,
            created_at=BASE_TIME - timedelta(minutes=4),
        ),
    }
    db.add_all(services.values())
    await db.commit()
    return services


async def _create_user(db: AsyncSession, email: str, name: str, role: UserRole) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash("secret123"),
        name=name,
        phone="+21650000000",
        role=role.value,
        provider=AuthProvider.EMAIL.value,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def admin_user(db: AsyncSession) -> User:
    return await _create_user(db, "admin@nexus.com", "Admin", UserRole.ADMIN)


@pytest.fixture
async def customer_user(db: AsyncSession) -> User:
    return await _create_user(db, "jane@example.com", "Jane Doe", UserRole.USER)


@pytest.fixture
async def sample_order(db: AsyncSession, sample_services, customer_user) -> Order:
    service = sample_services["esim_b"]
    order = Order(
        user_id=customer_user.id,
        service_id=service.id,
        service_name=service.name,
        category=service.category,
        subcategory=service.subcategory,
        price=service.price,
        currency=service.currency,
        fee_percent=Decimal("2.00"),
        processing_fee=Decimal("1.20"),
        customer_info="Email: jane@example.com\nPhone: 123\nDetails: EID 42",
        customer_email="jane@example.com",
        customer_phone="123",
        status=OrderStatus.PENDING_WHATSAPP.value,
        created_at=BASE_TIME,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)
    return order
