from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import require_admin
from app.api.deps.database import get_db
from app.models.user import User
from app.schemas.user import User as UserSchema
from app.schemas.user import UserAdminCreate, UserAdminUpdate
from app.services.user import UserManagementService

router = APIRouter()


@router.get("", response_model=list[UserSchema])
async def get_users(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Get all user accounts, newest first."""
    return await UserManagementService.get_users(db)


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserAdminCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    return await UserManagementService.create_user(db, user_data)


@router.put("/{user_id}", response_model=UserSchema)
async def update_user(
    user_id: str,
    user_data: UserAdminUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    return await UserManagementService.update_user(db, user_id, user_data)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(require_admin),
):
    """Delete a user. Admins cannot delete their own account."""
    await UserManagementService.delete_user(db, user_id, current_admin)
    return {"message": "User deleted successfully"}
