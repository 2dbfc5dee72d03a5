# src/social_publisher/UAA/repository.py
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from typing import Optional
import uuid
from datetime import datetime

from .models import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _first(self, *criteria) -> Optional[User]:
        res = await self.session.execute(select(User).where(*criteria))
        return res.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(User.email == email.lower())

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._first(User.username == username)

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._first(User.id == user_id)

    async def save(self, user: User) -> User:
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def touch_last_login(self, user: User) -> User:
        user.last_login = datetime.utcnow()
        return await self.save(user)
