# src/social_publisher/models/post.py
from sqlmodel import SQLModel, Field, Column
from typing import List, Optional, Union
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import uuid
from sqlalchemy import JSON, Text


class PostStatus(str, Enum):
    draft = "draft"
    scheduled = "scheduled"
    posted = "posted"
    failed = "failed"


@dataclass(frozen=True)
class Draft:
    """Stored but not yet dispatched."""


@dataclass(frozen=True)
class Scheduled:
    scheduled_for: datetime


@dataclass(frozen=True)
class Posted:
    external_id: str
    posted_at: datetime


@dataclass(frozen=True)
class Failed:
    error: str


PostState = Union[Draft, Scheduled, Posted, Failed]
DispatchOutcome = Union[Posted, Failed]


class Post(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    media_urls: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    platforms: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    scheduled_for: Optional[datetime] = Field(default=None)
    status: PostStatus = Field(default=PostStatus.draft, index=True)
    ayrshare_id: Optional[str] = Field(default=None)
    error: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    posted_at: Optional[datetime] = Field(default=None)

    @property
    def state(self) -> PostState:
        if self.status == PostStatus.posted:
            return Posted(external_id=self.ayrshare_id, posted_at=self.posted_at)
        if self.status == PostStatus.failed:
            return Failed(error=self.error)
        if self.status == PostStatus.scheduled:
            return Scheduled(scheduled_for=self.scheduled_for)
        return Draft()

    def apply_state(self, state: PostState) -> None:
        """
        Single writer for status and the columns tied to it, so that
        ayrshare_id is only set for posted rows and error only for failed ones.
        """
        self.ayrshare_id = None
        self.error = None
        if isinstance(state, Posted):
            if not state.external_id:
                raise ValueError("posted state requires an external id")
            self.status = PostStatus.posted
            self.ayrshare_id = state.external_id
            self.posted_at = state.posted_at
        elif isinstance(state, Failed):
            self.status = PostStatus.failed
            self.error = state.error
        elif isinstance(state, Scheduled):
            self.status = PostStatus.scheduled
            self.scheduled_for = state.scheduled_for
        elif isinstance(state, Draft):
            self.status = PostStatus.draft
        else:
            raise TypeError(f"unknown post state: {state!r}")
