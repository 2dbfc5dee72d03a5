# src/social_publisher/routers/campaigns_router.py
"""
Campaign endpoints. Campaigns are not persisted: POST echoes the request
back as a campaign and GET reports one summary covering every post.
"""
import time
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.dependencies.auth import get_current_user
from social_publisher.dependencies.db import get_session_dep
from social_publisher.errors import ValidationError
from social_publisher.infrastructure.posts_repo import PostsRepository
from social_publisher.models.platform import Platform
from social_publisher.schemas.campaign_schema import CampaignCreate, CampaignRead, CampaignSummary

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.post("/", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
async def create_campaign(payload: CampaignCreate, current_user=Depends(get_current_user)):
    if not payload.name or not payload.platforms:
        raise ValidationError("Campaign name and platforms are required")
    now = datetime.utcnow()
    return {
        "id": f"campaign-{int(time.time() * 1000)}",
        "name": payload.name,
        "description": payload.description,
        "platforms": payload.platforms,
        "post_ids": payload.post_ids,
        "user_id": current_user.id,
        "status": "active",
        "created_at": now,
        "updated_at": now,
    }


@router.get("/", response_model=List[CampaignSummary])
async def list_campaigns(session: AsyncSession = Depends(get_session_dep), current_user=Depends(get_current_user)):
    posts = await PostsRepository(session).list_by_user(current_user.id, limit=None)
    return [
        {
            "id": "campaign-1",
            "name": "Overall Campaign",
            "description": "All posts",
            "platforms": list(Platform),
            "post_count": len(posts),
            "status": "active",
        }
    ]
