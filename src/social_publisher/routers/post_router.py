# src/social_publisher/routers/post_router.py
from typing import List, Optional
import uuid
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.dependencies.auth import get_current_user
from social_publisher.dependencies.db import get_session_dep
from social_publisher.dependencies.publisher import get_publisher
from social_publisher.errors import ValidationError
from social_publisher.infrastructure.ayrshare_client import AyrshareClient
from social_publisher.infrastructure.posts_repo import DEFAULT_LIST_LIMIT
from social_publisher.models.post import PostStatus
from social_publisher.schemas.post_schema import PostCreate, PostRead, PostStatsRead
from social_publisher.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    session: AsyncSession = Depends(get_session_dep),
    publisher: AyrshareClient = Depends(get_publisher),
    current_user=Depends(get_current_user),
):
    svc = PostService(session, publisher)
    return await svc.create_post(user_id=current_user.id, payload=payload)


@router.get("/", response_model=List[PostRead])
async def list_posts(
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=DEFAULT_LIST_LIMIT),
    status_filter: Optional[PostStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session_dep),
    current_user=Depends(get_current_user),
):
    return await PostService(session).list_posts(current_user.id, limit=limit, status=status_filter)


@router.get("/stats", response_model=PostStatsRead)
async def post_stats(
    tz: Optional[str] = None,
    session: AsyncSession = Depends(get_session_dep),
    current_user=Depends(get_current_user),
):
    zone = None
    if tz:
        try:
            zone = ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"unknown time zone: {tz}")
    stats, by_status = await PostService(session).stats(current_user.id, tz=zone)
    return {**stats.as_dict(), "by_status": by_status}


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: uuid.UUID,
    session: AsyncSession = Depends(get_session_dep),
    current_user=Depends(get_current_user),
):
    return await PostService(session).get_post(current_user.id, post_id)
