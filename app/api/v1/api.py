from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin,
    auth,
    catalog,
    favorites,
    orders,
    settings,
    users,
)

api_router = APIRouter()

# Authentication endpoints
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])

# Customer-facing catalog
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])

# Checkout and order history
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])

# Favorites (account or guest)
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])

# User management endpoints
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Global settings
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])

# Back office: category tree, services, orders and statistics
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
