import pytest
from httpx import ASGITransport, AsyncClient

from social_publisher.dependencies.auth import get_current_user
from social_publisher.main import app


def _storage_offline():
    raise RuntimeError("storage offline")


@pytest.mark.asyncio
async def test_unexpected_error_returns_json_500(client, headers):
    app.dependency_overrides[get_current_user] = _storage_offline
    try:
        # starlette re-raises after the catch-all handler responds
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/posts/", headers=headers)
    finally:
        app.dependency_overrides.pop(get_current_user, None)

    assert response.status_code == 500
    assert response.json() == {"detail": "storage offline"}


@pytest.mark.asyncio
async def test_domain_errors_keep_their_status(client):
    response = await client.get("/posts/", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}
