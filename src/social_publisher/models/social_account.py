# src/social_publisher/models/social_account.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
import uuid
from sqlalchemy import UniqueConstraint

from .platform import Platform


class SocialAccount(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "platform", name="uq_socialaccount_user_platform"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    platform: Platform = Field(index=True)
    username: str
    profile_url: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
