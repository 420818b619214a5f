from typing import Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidReferenceError, NotFoundError
from app.models.favorite import Favorite
from app.models.order import Order
from app.models.review import Review
from app.models.service import ServiceItem
from app.schemas.service import ServiceCreate, ServiceUpdate
from app.services.category import CategoryTreeService

logger = structlog.get_logger(__name__)


class ServiceManagementService:
    """Business logic for catalog services."""

    @staticmethod
    async def get_services(
        db: AsyncSession,
        category: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> list[ServiceItem]:
        """Get services newest first, optionally filtered by category and status."""
        stmt = select(ServiceItem)
        if category is not None:
            stmt = stmt.where(ServiceItem.category == category)
        if active is not None:
            stmt = stmt.where(ServiceItem.active == active)
        stmt = stmt.order_by(ServiceItem.created_at.desc())

        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_service(db: AsyncSession, service_id: str) -> Optional[ServiceItem]:
        """Get a single service."""
        result = await db.execute(select(ServiceItem).where(ServiceItem.id == service_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def validate_placement(
        db: AsyncSession,
        category: str,
        subcategory: Optional[str],
        second_subcategory_id: Optional[str],
    ) -> None:
        """Each level set on a service must exist and nest under the level above."""
        if not await CategoryTreeService.get_category(db, category):
            raise InvalidReferenceError("Category not found")

        if subcategory:
            db_subcategory = await CategoryTreeService.get_subcategory(db, subcategory)
            if not db_subcategory or db_subcategory.category_id != category:
                raise InvalidReferenceError(
                    f"Subcategory '{subcategory}' does not belong to category '{category}'"
                )
        elif second_subcategory_id:
            raise InvalidReferenceError("second_subcategory_id requires a subcategory")

        if second_subcategory_id:
            leaf = await CategoryTreeService.get_second_subcategory(
                db, second_subcategory_id
            )
            if not leaf or leaf.subcategory_id != subcategory:
                raise InvalidReferenceError(
                    f"Second subcategory '{second_subcategory_id}' does not belong "
                    f"to subcategory '{subcategory}'"
                )

    @staticmethod
    async def create_service(db: AsyncSession, service_data: ServiceCreate) -> ServiceItem:
        """Create a new service."""
        await ServiceManagementService.validate_placement(
            db,
            service_data.category,
            service_data.subcategory,
            service_data.second_subcategory_id,
        )

        db_service = ServiceItem(**service_data.model_dump())
        db.add(db_service)
        await db.commit()
        await db.refresh(db_service)

        logger.info(
            "Service created",
            service_id=db_service.id,
            service_name=db_service.name,
            category=db_service.category,
        )
        return db_service

    @staticmethod
    async def update_service(
        db: AsyncSession, service_id: str, service_data: ServiceUpdate
    ) -> ServiceItem:
        """Update a service. Orders keep their own snapshot of the old values."""
        db_service = await ServiceManagementService.get_service(db, service_id)
        if not db_service:
            raise NotFoundError("Service not found")

        update_data = service_data.model_dump(exclude_unset=True)

        placement_fields = {"category", "subcategory", "second_subcategory_id"}
        if placement_fields & update_data.keys():
            await ServiceManagementService.validate_placement(
                db,
                update_data.get("category", db_service.category),
                update_data.get("subcategory", db_service.subcategory),
                update_data.get(
                    "second_subcategory_id", db_service.second_subcategory_id
                ),
            )

        for field, value in update_data.items():
            setattr(db_service, field, value)

        await db.commit()
        await db.refresh(db_service)

        logger.info(
            "Service updated", service_id=service_id, fields=sorted(update_data.keys())
        )
        return db_service

    @staticmethod
    async def toggle_service_status(db: AsyncSession, service_id: str) -> ServiceItem:
        """Flip the active flag of a service."""
        db_service = await ServiceManagementService.get_service(db, service_id)
        if not db_service:
            raise NotFoundError("Service not found")

        db_service.active = not db_service.active
        await db.commit()
        await db.refresh(db_service)

        logger.info("Service status toggled", service_id=service_id, active=db_service.active)
        return db_service

    @staticmethod
    async def delete_service(db: AsyncSession, service_id: str) -> bool:
        """Delete a service.

        Reviews and favorites go with it; orders only lose the link and
        keep their snapshot.
        """
        db_service = await ServiceManagementService.get_service(db, service_id)
        if not db_service:
            raise NotFoundError("Service not found")

        await db.execute(delete(Review).where(Review.service_id == service_id))
        await db.execute(delete(Favorite).where(Favorite.service_id == service_id))
        detached = await db.execute(
            update(Order).where(Order.service_id == service_id).values(service_id=None)
        )
        await db.delete(db_service)
        await db.commit()

        logger.info(
            "Service deleted",
            service_id=service_id,
            detached_orders=detached.rowcount,
        )
        return True
