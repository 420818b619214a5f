from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import get_favorite_owner
from app.api.deps.database import get_db
from app.schemas.admin import FavoriteList, FavoriteToggleResult
from app.services.favorite import FavoriteService

router = APIRouter()


@router.get("", response_model=FavoriteList)
async def get_favorites(
    db: AsyncSession = Depends(get_db),
    owner_key: Optional[str] = Depends(get_favorite_owner),
):
    favorite_ids = await FavoriteService.get_favorite_ids(db, owner_key)
    return FavoriteList(service_ids=sorted(favorite_ids))


@router.post("/{service_id}/toggle", response_model=FavoriteToggleResult)
async def toggle_favorite(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    owner_key: Optional[str] = Depends(get_favorite_owner),
):
    """Add or remove a service from the caller's favorites."""
    is_favorite = await FavoriteService.toggle_favorite(db, owner_key, service_id)
    return FavoriteToggleResult(service_id=service_id, is_favorite=is_favorite)
