# src/social_publisher/services/post_service.py
from datetime import datetime, timezone, tzinfo
from typing import List, Optional, Tuple
import uuid

import httpx
import structlog
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.errors import NotFoundError, ValidationError
from social_publisher.infrastructure.ayrshare_client import AyrshareClient, AyrsharePublishError
from social_publisher.infrastructure.posts_repo import PostsRepository, DEFAULT_LIST_LIMIT
from social_publisher.models.post import (
    Draft,
    DispatchOutcome,
    Failed,
    Post,
    Posted,
    PostStatus,
    Scheduled,
)
from social_publisher.schemas.post_schema import PostCreate
from social_publisher.services.analytics import PostStats, compute_post_stats, count_by_status

logger = structlog.get_logger(__name__)


def to_utc_naive(ts: Optional[datetime]) -> Optional[datetime]:
    if ts is None or ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


class PostService:
    """
    Owns the post lifecycle: insert the row, dispatch through Ayrshare when
    the post is not scheduled, then record the outcome on the row.

    Dispatch failures end up in the post (status=failed, error=message)
    instead of being raised, so the caller always gets the stored post back.
    """

    def __init__(self, session: AsyncSession, publisher: Optional[AyrshareClient] = None):
        self.session = session
        self.posts = PostsRepository(session)
        self.publisher = publisher or AyrshareClient()

    async def create_post(self, user_id: uuid.UUID, payload: PostCreate) -> Post:
        if not payload.content or not payload.content.strip() or not payload.platforms:
            raise ValidationError("Content and at least one platform are required")

        now = datetime.utcnow()
        scheduled_for = to_utc_naive(payload.scheduled_for)
        if scheduled_for is not None and scheduled_for <= now:
            logger.info("post_schedule_in_past_publishing_now", user_id=str(user_id), scheduled_for=scheduled_for.isoformat())
            scheduled_for = None

        post = Post(
            user_id=user_id,
            content=payload.content,
            media_urls=list(payload.media_urls),
            platforms=[p.value for p in dict.fromkeys(payload.platforms)],
            created_at=now,
        )
        post.apply_state(Scheduled(scheduled_for=scheduled_for) if scheduled_for else Draft())
        post = await self.posts.create(post)
        logger.info("post_created", post_id=str(post.id), user_id=str(user_id), status=post.status.value, platforms=post.platforms)

        if post.status == PostStatus.scheduled:
            return post

        outcome = await self._dispatch(post)
        return await self.posts.update_outcome(post, outcome)

    async def _dispatch(self, post: Post) -> DispatchOutcome:
        try:
            result = await self.publisher.publish(post.content, post.platforms, post.media_urls)
        except AyrsharePublishError as exc:
            logger.warning("post_dispatch_failed", post_id=str(post.id), error=exc.message, status_code=exc.status_code)
            return Failed(error=exc.message)
        except httpx.HTTPError as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("post_dispatch_transport_error", post_id=str(post.id), error=message)
            return Failed(error=message)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.exception("post_dispatch_error", post_id=str(post.id), error=message)
            return Failed(error=message)

        if not result.external_id:
            logger.warning("post_dispatch_missing_id", post_id=str(post.id))
            return Failed(error="Ayrshare response did not include a post id")

        logger.info("post_dispatched", post_id=str(post.id), ayrshare_id=result.external_id)
        return Posted(external_id=result.external_id, posted_at=datetime.utcnow())

    async def list_posts(
        self,
        user_id: uuid.UUID,
        limit: int = DEFAULT_LIST_LIMIT,
        status: Optional[PostStatus] = None,
    ) -> List[Post]:
        return await self.posts.list_by_user(user_id, limit=min(limit, DEFAULT_LIST_LIMIT), status=status)

    async def get_post(self, user_id: uuid.UUID, post_id: uuid.UUID) -> Post:
        post = await self.posts.get_for_user(user_id, post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    async def stats(self, user_id: uuid.UUID, tz: Optional[tzinfo] = None) -> Tuple[PostStats, dict]:
        posts = await self.posts.list_by_user(user_id, limit=None)
        return compute_post_stats(posts, tz=tz), count_by_status(posts)
