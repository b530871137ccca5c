"""
Post and PostStats models.

A post is written by one identity (``user_id``) and is either a draft or
published. Every post gets exactly one ``post_stats`` row at compose time,
holding view/like/share counters.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text, Index


def _utc_now() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


STAT_FIELDS = ("views", "likes", "shares")


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=36)
    slug: str = Field(unique=True, index=True, max_length=300)
    title: str = Field(max_length=500)
    content: str = Field(sa_column=Column(Text, nullable=False))
    excerpt: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    cover_image: Optional[str] = Field(default=None, max_length=2048)
    user_id: str = Field(index=True, max_length=64)
    published: bool = Field(default=False)
    featured: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    __table_args__ = (
        # Home feed: published (and featured) posts by date
        Index("ix_posts_published_created", "published", "created_at"),
        # Dashboard: an author's posts by date
        Index("ix_posts_user_created", "user_id", "created_at"),
    )


class PostStats(SQLModel, table=True):
    __tablename__ = "post_stats"

    post_id: str = Field(primary_key=True, foreign_key="posts.id", max_length=36)
    views: int = Field(default=0)
    likes: int = Field(default=0)
    shares: int = Field(default=0)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


__all__ = ["Post", "PostStats", "STAT_FIELDS"]
