from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class Profile(SQLModel, table=True):
    """Public metadata for an identity; ``id`` is the identity provider's subject."""

    __tablename__ = "profiles"

    id: str = Field(primary_key=True, max_length=64)
    email: Optional[str] = Field(default=None, nullable=True, index=True)
    full_name: Optional[str] = Field(default=None, nullable=True)
    avatar_url: Optional[str] = Field(default=None, nullable=True)
    bio: Optional[str] = Field(default=None, nullable=True)
    website: Optional[str] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class NotificationSettings(SQLModel, table=True):
    __tablename__ = "notification_settings"

    user_id: str = Field(primary_key=True, max_length=64)
    email_notifications: bool = Field(default=True)  # "Your post was published" emails
    updated_at: datetime = Field(default_factory=_utc_now)
