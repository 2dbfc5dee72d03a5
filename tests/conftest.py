import uuid
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.dependencies.db import get_session_dep
from social_publisher.dependencies.publisher import get_publisher
from social_publisher.infrastructure.ayrshare_client import PublishResult
from social_publisher.infrastructure.database import init_db
from social_publisher.main import app
from social_publisher.UAA import utils
from social_publisher.UAA.models import User


class FakePublisher:
    """Records publish calls; returns external_id or raises error."""

    def __init__(self):
        self.calls = []
        self.external_id = "ayr-123"
        self.error = None

    async def publish(self, content, platforms, media_urls=None):
        self.calls.append({"content": content, "platforms": list(platforms), "media_urls": list(media_urls or [])})
        if self.error is not None:
            raise self.error
        return PublishResult(external_id=self.external_id, raw={"id": self.external_id})


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    redis = AsyncMock()
    redis.exists.return_value = 0
    monkeypatch.setattr(utils, "redis_client", redis)
    return redis


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'social_publisher.db'}")
    await init_db(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def make_user(session_maker, username="owner"):
    async with session_maker() as session:
        user = User(email=f"{username}@example.com", username=username, hashed_password="not-a-real-hash")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


def auth_header(user_id) -> dict:
    return {"Authorization": f"Bearer {utils.create_access_token(str(user_id))['token']}"}


@pytest_asyncio.fixture
async def user(session_maker):
    return await make_user(session_maker)


@pytest_asyncio.fixture
async def client(session_maker, publisher):
    async def override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session_dep] = override_get_session
    app.dependency_overrides[get_publisher] = lambda: publisher
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_session_dep, None)
    app.dependency_overrides.pop(get_publisher, None)


@pytest.fixture
def headers(user):
    return auth_header(user.id)


@pytest.fixture
def stranger_headers():
    return auth_header(uuid.uuid4())


@pytest_asyncio.fixture
async def other_headers(session_maker):
    other = await make_user(session_maker, "other")
    return auth_header(other.id)
