# src/social_publisher/infrastructure/database.py
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = structlog.get_logger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./social_publisher.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

engine: AsyncEngine = create_async_engine(DATABASE_URL, echo=DB_ECHO)


async def init_db(bind: AsyncEngine = engine) -> None:
    # register every table on the metadata before create_all
    from social_publisher.UAA.models import User  # noqa: F401
    from social_publisher.models.post import Post  # noqa: F401
    from social_publisher.models.social_account import SocialAccount  # noqa: F401

    try:
        async with bind.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)
    except Exception as e:
        logger.exception("db_init_failed", error=str(e))
        raise


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
