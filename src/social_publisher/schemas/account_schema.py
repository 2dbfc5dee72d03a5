# src/social_publisher/schemas/account_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
import uuid
from datetime import datetime

from social_publisher.models.platform import Platform


class AccountCreate(BaseModel):
    platform: Optional[Platform] = None
    username: Optional[str] = None
    profile_url: Optional[str] = None


class AccountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    platform: Platform
    username: str
    profile_url: Optional[str]
    is_active: bool
    created_at: datetime


class PlatformRead(BaseModel):
    id: Platform
    name: str
