from collections import Counter
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.order import OPEN_ORDER_STATUSES, Order, OrderStatus
from app.models.service import ServiceItem
from app.models.user import User, UserRole
from app.schemas.admin import CategoryShare, CustomerSummary, DashboardStats, TopService

logger = structlog.get_logger(__name__)

TOP_SERVICES_LIMIT = 5


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _latest(*values: Optional[datetime]) -> Optional[datetime]:
    present = [_aware(v) for v in values if v is not None]
    return max(present) if present else None


class StatsService:
    """Admin dashboard figures and the customer directory."""

    @staticmethod
    async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
        orders = list((await db.execute(select(Order))).scalars().all())
        active_services = await db.scalar(
            select(func.count(ServiceItem.id)).where(ServiceItem.active.is_(True))
        )

        cancelled = OrderStatus.CANCELLED.value
        open_statuses = {status.value for status in OPEN_ORDER_STATUSES}

        total_revenue = sum(
            (Decimal(o.total) for o in orders if o.status != cancelled), Decimal("0")
        )
        pending_orders = sum(1 for o in orders if o.status in open_statuses)

        service_counts = Counter(o.service_name for o in orders)
        top_services = [
            TopService(name=name, count=count)
            for name, count in service_counts.most_common(TOP_SERVICES_LIMIT)
        ]

        category_counts = Counter(o.category for o in orders)
        category_stats = [
            CategoryShare(
                category=category,
                count=count,
                percentage=round(count / len(orders) * 100),
            )
            for category, count in category_counts.most_common()
        ]

        return DashboardStats(
            total_revenue=total_revenue,
            total_orders=len(orders),
            pending_orders=pending_orders,
            active_services=active_services or 0,
            top_services=top_services,
            category_stats=category_stats,
        )

    @staticmethod
    async def get_customers(db: AsyncSession) -> list[CustomerSummary]:
        """Registered users merged with guests known from order emails."""
        users = list((await db.execute(select(User))).scalars().all())
        orders = list((await db.execute(select(Order))).scalars().all())

        customers: dict[str, CustomerSummary] = {}
        user_keys: dict[str, str] = {}
        for user in users:
            key = user.email.lower()
            user_keys[user.id] = key
            customers[key] = CustomerSummary(
                user_id=user.id,
                email=user.email,
                name=user.name,
                phone=user.phone,
                role=user.role,
                provider=user.provider,
                is_registered=True,
                last_activity=_aware(user.created_at),
            )

        for order in orders:
            key = user_keys.get(order.user_id) or (order.customer_email or "").lower()
            if not key:
                continue

            customer = customers.get(key)
            if customer is None:
                customer = CustomerSummary(
                    email=order.customer_email,
                    name=order.customer_email.split("@")[0],
                    phone=order.customer_phone,
                    role=UserRole.USER.value,
                    is_registered=False,
                )
                customers[key] = customer

            customer.order_count += 1
            if order.status != OrderStatus.CANCELLED.value:
                customer.total_spent += Decimal(order.total)
            customer.last_activity = _latest(customer.last_activity, order.created_at)
            if not customer.phone and order.customer_phone:
                customer.phone = order.customer_phone

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            customers.values(),
            key=lambda c: c.last_activity or epoch,
            reverse=True,
        )
