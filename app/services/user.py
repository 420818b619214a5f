from typing import Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.core.security import get_password_hash
from app.models.favorite import Favorite
from app.models.order import Order
from app.models.review import Review
from app.models.user import AuthProvider, User, UserRole
from app.schemas.user import UserAdminCreate, UserAdminUpdate, UserProfileUpdate
from app.services.auth import AuthService

logger = structlog.get_logger(__name__)


class UserManagementService:
    """Profile updates and the admin user directory."""

    @staticmethod
    async def get_users(db: AsyncSession) -> list[User]:
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def update_profile(
        db: AsyncSession, user: User, profile_data: UserProfileUpdate
    ) -> User:
        update_data = profile_data.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)

        for field, value in update_data.items():
            setattr(user, field, value)
        if password:
            user.password_hash = get_password_hash(password)

        await db.commit()
        await db.refresh(user)

        logger.info("Profile updated", user_id=user.id, fields=sorted(update_data))
        return user

    @staticmethod
    async def create_user(db: AsyncSession, user_data: UserAdminCreate) -> User:
        return await AuthService.register(db, user_data, role=user_data.role)

    @staticmethod
    async def update_user(
        db: AsyncSession, user_id: str, user_data: UserAdminUpdate
    ) -> User:
        user = await AuthService.get_user_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")

        update_data = user_data.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)

        new_email = update_data.get("email")
        if new_email and new_email != user.email:
            existing = await AuthService.get_user_by_email(db, new_email)
            if existing and existing.id != user.id:
                raise ConflictError("An account with this email already exists")

        if update_data.get("role") is not None:
            update_data["role"] = update_data["role"].value

        for field, value in update_data.items():
            if value is not None:
                setattr(user, field, value)
        if password:
            user.password_hash = get_password_hash(password)

        await db.commit()
        await db.refresh(user)

        logger.info("User updated", user_id=user.id, fields=sorted(update_data))
        return user

    @staticmethod
    async def delete_user(db: AsyncSession, user_id: str, acting_user: User) -> bool:
        """Delete an account. Orders stay, detached from the account."""
        if user_id == acting_user.id:
            raise PermissionDeniedError("You cannot delete your own account")

        user = await AuthService.get_user_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")

        await db.execute(
            update(Order).where(Order.user_id == user_id).values(user_id=None)
        )
        await db.execute(delete(Review).where(Review.user_id == user_id))
        await db.execute(delete(Favorite).where(Favorite.owner_key == user_id))
        await db.delete(user)
        await db.commit()

        logger.info("User deleted", user_id=user_id, deleted_by=acting_user.id)
        return True

    @staticmethod
    async def ensure_admin_account(
        db: AsyncSession, email: str, password: Optional[str], name: str = "Admin"
    ) -> Optional[User]:
        """Create the bootstrap admin if it is missing and a password is set."""
        existing = await AuthService.get_user_by_email(db, email)
        if existing or not password:
            return existing

        user = User(
            email=email.strip().lower(),
            password_hash=get_password_hash(password),
            name=name,
            role=UserRole.ADMIN.value,
            provider=AuthProvider.EMAIL.value,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info("Admin account created", user_id=user.id)
        return user
