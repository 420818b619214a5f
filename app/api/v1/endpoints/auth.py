from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import get_current_user
from app.api.deps.database import get_db
from app.models.user import User
from app.schemas.user import Token, UserLogin, UserProfileUpdate, UserRegister
from app.schemas.user import User as UserSchema
from app.services.auth import AuthService
from app.services.user import UserManagementService

router = APIRouter()


def _token_response(user: User) -> Token:
    return Token(
        access_token=AuthService.issue_token(user),
        user=UserSchema.model_validate(user),
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Create an email account and sign it in."""
    user = await AuthService.register(db, user_data)
    return _token_response(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await AuthService.authenticate(db, credentials.email, credentials.password)
    return _token_response(user)


@router.get("/me", response_model=UserSchema)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return current_user


@router.put("/me", response_model=UserSchema)
async def update_profile(
    profile_data: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await UserManagementService.update_profile(db, current_user, profile_data)
