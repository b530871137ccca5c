from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime


class PostFormBase(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    published: bool = False

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("cover_image")
    @classmethod
    def empty_cover_is_none(cls, value: Optional[str]) -> Optional[str]:
        # An empty image field means "no cover image"
        return value or None


class PostCreate(PostFormBase):
    category_ids: List[str] = []


class PostUpdate(PostFormBase):
    pass


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    content: str
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    user_id: str
    published: bool
    featured: bool
    created_at: datetime
    updated_at: datetime


class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None


class PostWithAuthorOut(PostOut):
    author: Optional[AuthorOut] = None


class HomeFeedOut(BaseModel):
    featured: List[PostWithAuthorOut]
    recent: List[PostWithAuthorOut]


class PostStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    post_id: str
    views: int
    likes: int
    shares: int
    updated_at: datetime


class NoticeOut(BaseModel):
    id: str
    type: Literal["success", "error", "warning"]
    message: str
    duration_ms: int


class PostWorkflowOut(BaseModel):
    """Result of compose/edit/delete: what changed, where to go next, what to tell the user."""

    post: Optional[PostOut] = None
    redirect_to: Optional[str] = None
    notices: List[NoticeOut] = []


class ProfileIn(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    email: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NotificationSettingsIn(BaseModel):
    email_notifications: bool


class NotificationSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email_notifications: bool


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class UploadOut(BaseModel):
    url: str


# Function payloads


class ImageTransformRequest(BaseModel):
    image_url: str


class NotificationRequest(BaseModel):
    post_id: str
    user_id: str
