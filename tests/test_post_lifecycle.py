import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlmodel import select

from social_publisher.dependencies.publisher import get_publisher
from social_publisher.infrastructure.ayrshare_client import AyrshareClient, AyrsharePublishError
from social_publisher.main import app
from social_publisher.models.post import Post


async def _all_posts(session_maker):
    async with session_maker() as session:
        res = await session.execute(select(Post))
        return list(res.scalars().all())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"content": "", "platforms": ["facebook"]},
        {"content": "   ", "platforms": ["facebook"]},
        {"platforms": ["x"]},
        {"content": "hello", "platforms": []},
        {"content": "hello"},
    ],
)
async def test_missing_content_or_platforms_is_rejected_without_writing(client, headers, publisher, session_maker, body):
    response = await client.post("/posts/", json=body, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Content and at least one platform are required"
    assert await _all_posts(session_maker) == []
    assert publisher.calls == []


@pytest.mark.asyncio
async def test_content_longer_than_280_chars_is_rejected(client, headers, session_maker):
    response = await client.post("/posts/", json={"content": "a" * 281, "platforms": ["x"]}, headers=headers)

    assert response.status_code == 400
    assert await _all_posts(session_maker) == []


@pytest.mark.asyncio
async def test_unknown_platform_is_rejected(client, headers, session_maker):
    response = await client.post("/posts/", json={"content": "hi", "platforms": ["myspace"]}, headers=headers)

    assert response.status_code == 400
    assert await _all_posts(session_maker) == []


@pytest.mark.asyncio
async def test_future_schedule_stores_scheduled_post_without_dispatch(client, headers, publisher):
    when = (datetime.now(timezone.utc) + timedelta(days=2)).replace(microsecond=0)
    response = await client.post(
        "/posts/",
        json={"content": "launch day", "platforms": ["linkedin"], "scheduled_for": when.isoformat()},
        headers=headers,
    )

    assert response.status_code == 201
    post = response.json()
    assert post["status"] == "scheduled"
    assert post["ayrshare_id"] is None
    assert post["error"] is None
    assert post["posted_at"] is None
    assert datetime.fromisoformat(post["scheduled_for"]) == when.replace(tzinfo=None)
    assert publisher.calls == []


@pytest.mark.asyncio
async def test_immediate_post_is_published_once_and_marked_posted(client, headers, publisher):
    response = await client.post(
        "/posts/",
        json={
            "content": "hello world",
            "platforms": ["facebook", "x", "facebook"],
            "media_urls": ["https://cdn.example.com/a.png"],
        },
        headers=headers,
    )

    assert response.status_code == 201
    post = response.json()
    assert post["status"] == "posted"
    assert post["ayrshare_id"] == "ayr-123"
    assert post["error"] is None
    assert post["platforms"] == ["facebook", "x"]
    assert datetime.fromisoformat(post["posted_at"]) >= datetime.fromisoformat(post["created_at"])
    assert publisher.calls == [
        {"content": "hello world", "platforms": ["facebook", "x"], "media_urls": ["https://cdn.example.com/a.png"]}
    ]


@pytest.mark.asyncio
async def test_rejected_publish_keeps_message_verbatim(client, headers, publisher, session_maker):
    publisher.error = AyrsharePublishError("Duplicate post. Ayrshare: status 137", status_code=400)

    response = await client.post("/posts/", json={"content": "again", "platforms": ["x"]}, headers=headers)

    assert response.status_code == 201
    post = response.json()
    assert post["status"] == "failed"
    assert post["error"] == "Duplicate post. Ayrshare: status 137"
    assert post["ayrshare_id"] is None
    assert len(publisher.calls) == 1

    stored = await _all_posts(session_maker)
    assert [p.error for p in stored] == ["Duplicate post. Ayrshare: status 137"]


@pytest.mark.asyncio
async def test_transport_failure_marks_post_failed(client, headers, publisher):
    publisher.error = httpx.ConnectError("connection refused")

    response = await client.post("/posts/", json={"content": "offline", "platforms": ["tiktok"]}, headers=headers)

    assert response.status_code == 201
    assert response.json()["status"] == "failed"
    assert response.json()["error"] == "connection refused"


@pytest.mark.asyncio
async def test_unexpected_publisher_exception_marks_post_failed(client, headers, publisher, session_maker):
    publisher.error = RuntimeError("boom")

    response = await client.post("/posts/", json={"content": "kaboom", "platforms": ["x"]}, headers=headers)

    assert response.status_code == 201
    assert response.json()["status"] == "failed"
    assert response.json()["error"] == "boom"

    stored = await _all_posts(session_maker)
    assert [(p.status, p.error) for p in stored] == [("failed", "boom")]


@pytest.mark.asyncio
async def test_misconfigured_gateway_url_marks_post_failed(client, headers, session_maker):
    # a NUL in the host is rejected by httpx before any request is sent
    app.dependency_overrides[get_publisher] = lambda: AyrshareClient(api_key="k", base_url="https://ayr\x00share.test/api")

    response = await client.post("/posts/", json={"content": "hi", "platforms": ["x"]}, headers=headers)

    assert response.status_code == 201
    assert response.json()["status"] == "failed"
    assert response.json()["error"]

    stored = await _all_posts(session_maker)
    assert [p.status for p in stored] == ["failed"]


@pytest.mark.asyncio
async def test_structured_rejection_message_is_stored_as_text(client, headers, session_maker):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(400, json={"status": "error", "message": {"code": 137, "text": "dup"}})
    )
    app.dependency_overrides[get_publisher] = lambda: AyrshareClient(
        api_key="k", base_url="https://ayrshare.test/api", transport=transport
    )

    response = await client.post("/posts/", json={"content": "dup", "platforms": ["x"]}, headers=headers)

    assert response.status_code == 201
    assert response.json()["status"] == "failed"
    assert response.json()["error"] == '{"code": 137, "text": "dup"}'

    stored = await _all_posts(session_maker)
    assert [p.error for p in stored] == ['{"code": 137, "text": "dup"}']


@pytest.mark.asyncio
async def test_success_without_external_id_is_recorded_as_failure(client, headers, publisher):
    publisher.external_id = None

    response = await client.post("/posts/", json={"content": "no id", "platforms": ["x"]}, headers=headers)

    assert response.json()["status"] == "failed"
    assert response.json()["error"] == "Ayrshare response did not include a post id"


@pytest.mark.asyncio
async def test_schedule_in_the_past_publishes_immediately(client, headers, publisher):
    past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()

    response = await client.post(
        "/posts/", json={"content": "late", "platforms": ["instagram"], "scheduled_for": past}, headers=headers
    )

    post = response.json()
    assert post["status"] == "posted"
    assert post["scheduled_for"] is None
    assert len(publisher.calls) == 1


@pytest.mark.asyncio
async def test_concurrent_identical_submissions_are_not_deduplicated(client, headers, session_maker):
    body = {"content": "double click", "platforms": ["facebook"]}

    first, second = await asyncio.gather(
        client.post("/posts/", json=body, headers=headers),
        client.post("/posts/", json=body, headers=headers),
    )

    assert first.status_code == second.status_code == 201
    assert first.json()["id"] != second.json()["id"]
    assert len(await _all_posts(session_maker)) == 2


@pytest.mark.asyncio
async def test_post_is_only_readable_by_its_owner(client, headers, other_headers):
    created = await client.post("/posts/", json={"content": "mine", "platforms": ["x"]}, headers=headers)
    post_id = created.json()["id"]

    assert (await client.get(f"/posts/{post_id}", headers=headers)).status_code == 200
    response = await client.get(f"/posts/{post_id}", headers=other_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found"
