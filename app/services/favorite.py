from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StorefrontError
from app.models.favorite import GUEST_OWNER_PREFIX, Favorite
from app.models.service import ServiceItem
from app.models.user import User

logger = structlog.get_logger(__name__)


def favorite_owner_key(
    user: Optional[User], guest_session: Optional[str] = None
) -> Optional[str]:
    """Favorites belong to the user id, or to the visitor's guest session.

    A guest without a session id has no favorite set.
    """
    if user:
        return user.id
    if guest_session:
        return f"{GUEST_OWNER_PREFIX}{guest_session}"
    return None


class FavoriteService:
    """Per-owner favorite sets."""

    @staticmethod
    async def get_favorite_ids(db: AsyncSession, owner_key: Optional[str]) -> set[str]:
        if owner_key is None:
            return set()
        result = await db.execute(
            select(Favorite.service_id).where(Favorite.owner_key == owner_key)
        )
        return set(result.scalars().all())

    @staticmethod
    async def toggle_favorite(
        db: AsyncSession, owner_key: Optional[str], service_id: str
    ) -> bool:
        """Add the service if absent, remove it if present.

        Returns the membership after the toggle.
        """
        if owner_key is None:
            raise StorefrontError("A guest session id is required to keep favorites")
        if not await db.get(ServiceItem, service_id):
            raise NotFoundError("Service not found")

        result = await db.execute(
            select(Favorite).where(
                Favorite.owner_key == owner_key, Favorite.service_id == service_id
            )
        )
        existing = result.scalar_one_or_none()

        if existing:
            await db.delete(existing)
            is_favorite = False
        else:
            db.add(Favorite(owner_key=owner_key, service_id=service_id))
            is_favorite = True

        await db.commit()

        logger.info(
            "Favorite toggled",
            owner_key=owner_key,
            service_id=service_id,
            is_favorite=is_favorite,
        )
        return is_favorite
