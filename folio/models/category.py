import uuid
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint


def _new_id() -> str:
    return str(uuid.uuid4())


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=36)
    name: str = Field(max_length=100)
    slug: str = Field(unique=True, index=True, max_length=120)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PostCategory(SQLModel, table=True):
    __tablename__ = "post_categories"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=36)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=36)
    category_id: str = Field(foreign_key="categories.id", index=True, max_length=36)

    __table_args__ = (UniqueConstraint("post_id", "category_id", name="uq_post_category"),)
