# src/social_publisher/schemas/campaign_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
import uuid
from datetime import datetime

from social_publisher.models.platform import Platform


class CampaignCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    platforms: List[Platform] = Field(default_factory=list)
    post_ids: List[uuid.UUID] = Field(default_factory=list)


class CampaignRead(BaseModel):
    id: str
    name: str
    description: Optional[str]
    platforms: List[Platform]
    post_ids: List[uuid.UUID]
    user_id: uuid.UUID
    status: str
    created_at: datetime
    updated_at: datetime


class CampaignSummary(BaseModel):
    id: str
    name: str
    description: Optional[str]
    platforms: List[Platform]
    post_count: int
    status: str
