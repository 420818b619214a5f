from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import (
    get_current_user,
    get_current_user_optional,
    get_favorite_owner,
)
from app.api.deps.database import get_db
from app.models.user import User
from app.schemas.catalog import CatalogBrowseRequest, CatalogView
from app.schemas.category import Category
from app.schemas.review import Review, ReviewCreate, ServiceReviews
from app.schemas.service import CatalogItem, ServiceDetail
from app.services.catalog import CatalogService
from app.services.category import CategoryTreeService
from app.services.review import ReviewService

router = APIRouter()


@router.get("/categories", response_model=list[Category])
async def get_categories(db: AsyncSession = Depends(get_db)):
    """Full category tree in display order."""
    return await CategoryTreeService.get_category_tree(db)


@router.post("/browse", response_model=CatalogView)
async def browse_catalog(
    request: CatalogBrowseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
    owner_key: Optional[str] = Depends(get_favorite_owner),
):
    """Apply navigation actions to a catalog state and return the visible grid.

    Admin mode is honored only for admins.
    """
    state = request.state
    actions = request.actions
    if not (current_user and current_user.is_admin):
        state = state.model_copy(update={"admin_mode": False})
        actions = [a for a in actions if a.type != "set_admin_mode"]

    try:
        return await CatalogService.browse(
            db, state, owner_key, actions
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )


@router.get("/promotions", response_model=list[CatalogItem])
async def get_promotions(
    db: AsyncSession = Depends(get_db),
    owner_key: Optional[str] = Depends(get_favorite_owner),
):
    return await CatalogService.get_promotions(db, owner_key)


@router.get("/services/{service_id}", response_model=ServiceDetail)
async def get_service_detail(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
    owner_key: Optional[str] = Depends(get_favorite_owner),
):
    """Get a service with ratings, favorite flag and similar services."""
    detail = await CatalogService.get_service_detail(
        db,
        service_id,
        owner_key,
        admin_mode=bool(current_user and current_user.is_admin),
    )
    if not detail:
        raise HTTPException(status_code=404, detail="Service not found")
    return detail


@router.get("/services/{service_id}/reviews", response_model=ServiceReviews)
async def get_service_reviews(service_id: str, db: AsyncSession = Depends(get_db)):
    reviews = await ReviewService.get_reviews(db, service_id)
    summary = await ReviewService.get_rating_summary(db, service_id)
    return ServiceReviews(
        summary=summary, reviews=[Review.model_validate(r) for r in reviews]
    )


@router.post(
    "/services/{service_id}/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
)
async def add_service_review(
    service_id: str,
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await ReviewService.add_review(db, service_id, current_user, review_data)
