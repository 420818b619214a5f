import enum
import uuid

from sqlalchemy import Column, DateTime, String

from app.core.database import Base, utcnow


class UserRole(enum.Enum):
    ADMIN = "admin"
    USER = "user"


class AuthProvider(enum.Enum):
    EMAIL = "email"
    GOOGLE = "google"


class User(Base):
    """Storefront account; the credential is stored only as a salted hash."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # None for google sign-in
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)

    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    provider = Column(String(20), nullable=False, default=AuthProvider.EMAIL.value)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}', role='{self.role}')>"
