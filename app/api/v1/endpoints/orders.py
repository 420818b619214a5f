from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import get_current_user_optional
from app.api.deps.database import get_db
from app.models.user import User
from app.schemas.order import (
    Order,
    OrderCancelRequest,
    OrderCreated,
    OrderForm,
    SupportRequest,
)
from app.services.order import OrderService

router = APIRouter()


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    form: OrderForm,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Place an order and get the prefilled hand-off message and link.

    Guests may order; signed-in users have the order linked to their account.
    """
    order, handoff = await OrderService(db).create_order(form, current_user)
    return OrderCreated(order=Order.model_validate(order), handoff=handoff)


@router.get("", response_model=list[Order])
async def get_my_orders(
    email: Optional[str] = Query(None, description="Guest lookup by order email"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Order history: by account when signed in, otherwise by email."""
    if current_user is None and not email:
        raise HTTPException(
            status_code=400, detail="Sign in or provide the email used for the order"
        )
    return await OrderService(db).list_for_customer(user=current_user, email=email)


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel_order(
    order_id: str,
    request: OrderCancelRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    return await OrderService(db).cancel_order(
        order_id, user=current_user, email=request.email
    )


@router.post("/{order_id}/support", response_model=SupportRequest)
async def contact_support(
    order_id: str,
    request: OrderCancelRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Prefilled support message about an order."""
    return await OrderService(db).support_request(
        order_id, user=current_user, email=request.email
    )
