# src/social_publisher/infrastructure/posts_repo.py
from typing import List, Optional
import uuid

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from social_publisher.models.post import Post, PostStatus, DispatchOutcome

DEFAULT_LIST_LIMIT = 50


class PostsRepository:
    """
    Repository for Post rows. Every read is scoped by the owning user id.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, post: Post) -> Post:
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def get_for_user(self, user_id: uuid.UUID, post_id: uuid.UUID) -> Optional[Post]:
        q = select(Post).where(Post.id == post_id, Post.user_id == user_id)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def update_outcome(self, post: Post, outcome: DispatchOutcome) -> Post:
        """
        Record the result of a dispatch attempt (Posted or Failed).
        """
        post.apply_state(outcome)
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def list_by_user(
        self,
        user_id: uuid.UUID,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
        status: Optional[PostStatus] = None,
    ) -> List[Post]:
        q = select(Post).where(Post.user_id == user_id)
        if status is not None:
            q = q.where(Post.status == status)
        q = q.order_by(Post.created_at.desc())
        if limit is not None:
            q = q.limit(limit)
        res = await self.session.execute(q)
        return list(res.scalars().all())
