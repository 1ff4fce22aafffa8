from typing import Optional
from pydantic import BaseModel, field_validator

from app.schemas.user import UserResponse


class NormalizedProfile(BaseModel):
    """Telegram user as carried in the ``user`` field of verified init data."""

    id: int
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    photo_url: str = ""
    language_code: Optional[str] = None
    is_premium: Optional[bool] = None

    # Only id is mandatory; unusable optional values fall back to defaults.
    @field_validator("first_name", "last_name", "username", "photo_url", mode="before")
    @classmethod
    def display_text_or_empty(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("language_code", mode="before")
    @classmethod
    def language_code_or_none(cls, v):
        return v if isinstance(v, str) and v else None

    @field_validator("is_premium", mode="before")
    @classmethod
    def is_premium_or_none(cls, v):
        return v if isinstance(v, bool) else None


class ProfileResponse(NormalizedProfile):
    database_saved: bool = False
    database_error: Optional[str] = None
    database_row: Optional[UserResponse] = None
