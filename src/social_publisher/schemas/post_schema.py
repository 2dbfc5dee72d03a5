# src/social_publisher/schemas/post_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
import uuid
from datetime import datetime

from social_publisher.models.platform import Platform
from social_publisher.models.post import PostStatus

MAX_CONTENT_LENGTH = 280


class PostCreate(BaseModel):
    content: Optional[str] = Field(default=None, max_length=MAX_CONTENT_LENGTH)
    media_urls: List[str] = Field(default_factory=list)
    platforms: List[Platform] = Field(default_factory=list)
    scheduled_for: Optional[datetime] = None  # absent means publish now


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    content: str
    media_urls: List[str]
    platforms: List[Platform]
    scheduled_for: Optional[datetime]
    status: PostStatus
    ayrshare_id: Optional[str]
    error: Optional[str]
    created_at: datetime
    posted_at: Optional[datetime]


class PostStatsRead(BaseModel):
    total_posts: int
    posted_today: int
    scheduled: int
    failed: int
    top_platform: Platform
    by_status: Dict[str, int]
