from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserBase(BaseModel):
    telegram_id: int
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    username: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=1024)
    language_code: Optional[str] = Field(None, max_length=16)
    is_premium: Optional[bool] = None


class UserCreate(UserBase):
    last_login: Optional[datetime] = None


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    username: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=1024)
    language_code: Optional[str] = Field(None, max_length=16)
    is_premium: Optional[bool] = None
    last_login: Optional[datetime] = None


class UserResponse(UserBase):
    model_config = {"from_attributes": True}

    id: int
    last_login: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class UserStats(BaseModel):
    total_users: int = 0
    today_logins: int = 0
    new_today: int = 0
