from app.models.base import Base, TimestampMixin
from app.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
]
