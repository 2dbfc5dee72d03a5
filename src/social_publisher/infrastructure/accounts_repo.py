# src/social_publisher/infrastructure/accounts_repo.py
from typing import List, Optional
import uuid

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from social_publisher.errors import ConflictError
from social_publisher.models.platform import Platform
from social_publisher.models.social_account import SocialAccount

logger = structlog.get_logger(__name__)


class AccountsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_platform(self, user_id: uuid.UUID, platform: Platform) -> Optional[SocialAccount]:
        q = select(SocialAccount).where(
            SocialAccount.user_id == user_id,
            SocialAccount.platform == platform,
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_by_user(self, user_id: uuid.UUID) -> List[SocialAccount]:
        q = (
            select(SocialAccount)
            .where(SocialAccount.user_id == user_id)
            .order_by(SocialAccount.created_at)
        )
        res = await self.session.execute(q)
        return list(res.scalars().all())

    async def create(
        self,
        user_id: uuid.UUID,
        platform: Platform,
        username: str,
        profile_url: Optional[str] = None,
    ) -> SocialAccount:
        """
        Register a linked account. One account per (user, platform);
        a second registration raises ConflictError and leaves the first untouched.
        """
        if await self.get_by_user_and_platform(user_id, platform):
            logger.info("account_conflict", user_id=str(user_id), platform=platform.value)
            raise ConflictError("Account already exists for this platform")

        account = SocialAccount(
            user_id=user_id,
            platform=platform,
            username=username,
            profile_url=profile_url,
            is_active=True,
        )
        self.session.add(account)
        try:
            await self.session.commit()
        except IntegrityError:
            # concurrent insert won the unique constraint
            await self.session.rollback()
            logger.info("account_conflict", user_id=str(user_id), platform=platform.value)
            raise ConflictError("Account already exists for this platform")
        await self.session.refresh(account)
        logger.info("account_created", user_id=str(user_id), platform=platform.value, account_id=str(account.id))
        return account
