# src/social_publisher/services/analytics.py
"""
Dashboard aggregates, recomputed from the post list on every read.
"""
from collections import Counter
from dataclasses import dataclass, asdict
from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Iterable, Optional

from social_publisher.models.platform import Platform
from social_publisher.models.post import Post, PostStatus

DEFAULT_TOP_PLATFORM = Platform.facebook


@dataclass
class PostStats:
    total_posts: int
    posted_today: int
    scheduled: int
    failed: int
    top_platform: Platform

    def as_dict(self) -> dict:
        return asdict(self)


def _local_date(ts: datetime, tz: tzinfo) -> date:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()


def top_platform(posts: Iterable[Post]) -> Platform:
    counts: Counter = Counter()
    for post in posts:
        for platform in post.platforms:
            counts[Platform(platform)] += 1
    if not counts:
        return DEFAULT_TOP_PLATFORM
    # Counter keeps insertion order and max() returns the first maximum
    return max(counts, key=counts.__getitem__)


def count_by_status(posts: Iterable[Post]) -> Dict[str, int]:
    posts = list(posts)
    counts = {"all": len(posts)}
    for status in PostStatus:
        counts[status.value] = sum(1 for p in posts if p.status == status)
    return counts


def compute_post_stats(
    posts: Iterable[Post],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> PostStats:
    posts = list(posts)
    tz = tz or timezone.utc
    today = today or datetime.now(tz).date()

    posted_today = sum(
        1 for p in posts
        if p.posted_at is not None and _local_date(p.posted_at, tz) == today
    )
    return PostStats(
        total_posts=len(posts),
        posted_today=posted_today,
        scheduled=sum(1 for p in posts if p.status == PostStatus.scheduled),
        failed=sum(1 for p in posts if p.status == PostStatus.failed),
        top_platform=top_platform(posts),
    )
