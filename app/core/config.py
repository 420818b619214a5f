from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Basic settings
    PROJECT_NAME: str = "Atlas Vault Storefront"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Database
    DATABASE_URL: str

    # Redis (catalog cache, disabled when unset)
    REDIS_URL: Optional[str] = None
    CATEGORY_CACHE_TTL_SECONDS: int = 300

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    # Storefront
    STORE_NAME: str = "ATLASVAULT"
    DEFAULT_CURRENCY: str = "TND"
    DEFAULT_CONTACT_NUMBER: str = "15550199090"
    HANDOFF_BASE_URL: str = "https://wa.me"

    # Seed admin account
    ADMIN_EMAIL: str = "admin@nexus.com"
    ADMIN_PASSWORD: Optional[str] = None

    # Celery
    CELERY_BROKER_URL: str = "memory://"
    CELERY_RESULT_BACKEND: str = "cache+memory://"
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = {"env_file": ".env", "case_sensitive": True}


# Global settings instance
settings = Settings()
