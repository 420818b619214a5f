from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.services.auth import AuthService
from app.services.favorite import favorite_owner_key

logger = structlog.get_logger(__name__)

# Guests may browse and order, so a missing header is not an error here
security = HTTPBearer(auto_error=False)

# Client-generated id that keeps one guest's favorites apart from another's
GUEST_SESSION_HEADER = "X-Guest-Session"


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Resolve the bearer token to a user.

    - No header: guest, returns None
    - Invalid or expired token, or unknown user: 401
    """
    if credentials is None:
        return None

    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        logger.info("Rejected bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await AuthService.get_user_by_id(db, user_id)
    if not user:
        logger.warning("Token subject not found", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning("Non-admin attempted admin access", user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user


async def get_favorite_owner(
    user: Optional[User] = Depends(get_current_user_optional),
    guest_session: Optional[str] = Header(
        None,
        alias=GUEST_SESSION_HEADER,
        min_length=8,
        max_length=64,
        pattern=r"^[A-Za-z0-9_-]+$",
    ),
) -> Optional[str]:
    """Owner key of the caller's favorite set, None for a guest without a session."""
    return favorite_owner_key(user, guest_session)
