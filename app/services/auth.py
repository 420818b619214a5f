from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, ConflictError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.user import AuthProvider, User, UserRole
from app.schemas.user import UserRegister

logger = structlog.get_logger(__name__)


class AuthService:
    """Account registration and credential checks."""

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
        return await db.get(User, user_id)

    @staticmethod
    async def register(
        db: AsyncSession,
        user_data: UserRegister,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Create an email account. Emails are unique regardless of case."""
        if await AuthService.get_user_by_email(db, user_data.email):
            raise ConflictError("An account with this email already exists")

        user = User(
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            name=user_data.name,
            phone=user_data.phone,
            role=role.value,
            provider=AuthProvider.EMAIL.value,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Duplicate registration", email=user_data.email, error=str(e))
            raise ConflictError("An account with this email already exists")

        await db.refresh(user)
        logger.info("User registered", user_id=user.id, role=user.role)
        return user

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> User:
        """Check a password against the stored salted hash."""
        user = await AuthService.get_user_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Login failed", email=email)
            raise AuthenticationError("Invalid email or password")

        logger.info("User logged in", user_id=user.id)
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(subject=user.id)
