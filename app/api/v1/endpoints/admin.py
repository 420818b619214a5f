from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import require_admin
from app.api.deps.database import get_db
from app.models.order import OrderStatus
from app.models.user import User
from app.schemas.admin import CustomerSummary, DashboardStats
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.order import Order, OrderStatusUpdate, OrderStatusUpdateResult
from app.schemas.service import Service, ServiceCreate, ServiceUpdate
from app.services.category import CategoryTreeService
from app.services.order import OrderService
from app.services.service import ServiceManagementService
from app.services.stats import StatsService

router = APIRouter()


# Category tree endpoints
@router.post(
    "/categories", response_model=Category, status_code=status.HTTP_201_CREATED
)
async def create_category(
    category_data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Create a category with its subcategories and second subcategories."""
    return await CategoryTreeService.create_category(db, category_data)


@router.put("/categories/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Replace a category and its whole subtree."""
    return await CategoryTreeService.update_category(db, category_id, category_data)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    await CategoryTreeService.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}


# Service endpoints
@router.get("/services", response_model=list[Service])
async def get_services(
    category: Optional[str] = None,
    active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Get services, inactive ones included."""
    return await ServiceManagementService.get_services(db, category, active)


@router.post("/services", response_model=Service, status_code=status.HTTP_201_CREATED)
async def create_service(
    service_data: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    return await ServiceManagementService.create_service(db, service_data)


@router.put("/services/{service_id}", response_model=Service)
async def update_service(
    service_id: str,
    service_data: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    return await ServiceManagementService.update_service(db, service_id, service_data)


@router.post("/services/{service_id}/toggle", response_model=Service)
async def toggle_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Activate or deactivate a service."""
    return await ServiceManagementService.toggle_service_status(db, service_id)


@router.delete("/services/{service_id}")
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    await ServiceManagementService.delete_service(db, service_id)
    return {"message": "Service deleted successfully"}


# Order endpoints
@router.get("/orders", response_model=list[Order])
async def get_orders(
    query: Optional[str] = None,
    order_status: Optional[OrderStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Search orders by reference, service name or customer email."""
    return await OrderService(db).list_all(query=query, status=order_status)


@router.put("/orders/{order_id}/status", response_model=OrderStatusUpdateResult)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    order, status_changed, message = await OrderService(db).update_status(
        order_id, update
    )
    return OrderStatusUpdateResult(
        order=Order.model_validate(order),
        status_changed=status_changed,
        message=message,
    )


# Dashboard endpoints
@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    return await StatsService.get_dashboard_stats(db)


@router.get("/customers", response_model=list[CustomerSummary])
async def get_customers(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Registered users and guest customers, most recently active first."""
    return await StatsService.get_customers(db)
