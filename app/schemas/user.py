from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.user import AuthProvider, UserRole
from app.utils.validation import validate_email_format


def normalize_email(email: str) -> str:
    email = email.strip().lower()
    if not email or not validate_email_format(email):
        raise ValueError("Please enter a valid email address")
    return email


class UserRegister(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return normalize_email(v)


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower()


class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=6, max_length=128)


class UserAdminCreate(UserRegister):
    role: UserRole = UserRole.USER


class UserAdminUpdate(UserProfileUpdate):
    email: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return normalize_email(v) if v is not None else v


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    phone: Optional[str] = None
    role: UserRole
    provider: AuthProvider
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
