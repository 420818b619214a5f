# Import all models to ensure they are registered with SQLAlchemy
from . import (
    category,
    favorite,
    order,
    review,
    service,
    setting,
    user,
)

__all__ = [
    "category",
    "favorite",
    "order",
    "review",
    "service",
    "setting",
    "user",
]
