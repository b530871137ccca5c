"""
Test fixtures for folio tests.

Provides database session fixtures, sample rows, fake function clients and
an authenticated TestClient.
"""

import os
import uuid

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-folio-unit-tests-only")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator, List
from unittest.mock import MagicMock
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from folio.core.notices import NoticeChannel
from folio.models import Category, NotificationSettings, Post, PostStats, Profile
from folio.services.functions_client import ImageTransformClient, NotificationClient
from folio.services.storage import ObjectStorage

# In-memory SQLite for unit tests (fast, isolated)
TEST_DATABASE_URL = "sqlite:///:memory:"

AUTHOR_ID = "user-author-1"
OTHER_ID = "user-other-2"


@pytest.fixture(scope="function")
def test_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def author_profile(test_session: Session) -> Profile:
    profile = Profile(
        id=AUTHOR_ID,
        email="author@example.com",
        full_name="Ada Author",
        avatar_url="https://cdn.example.com/ada.png",
    )
    test_session.add(profile)
    test_session.add(NotificationSettings(user_id=AUTHOR_ID, email_notifications=True))
    test_session.commit()
    test_session.refresh(profile)
    return profile


@pytest.fixture
def sample_categories(test_session: Session) -> List[Category]:
    categories = [
        Category(id="cat-python", name="Python", slug="python"),
        Category(id="cat-travel", name="Travel", slug="travel"),
    ]
    for c in categories:
        test_session.add(c)
    test_session.commit()
    return categories


def make_post(session: Session, **overrides) -> Post:
    now = datetime.now(timezone.utc)
    fields = dict(
        title="Hello World",
        content="First paragraph.\nSecond paragraph.",
        user_id=AUTHOR_ID,
        slug=f"hello-world-{uuid.uuid4().hex[:6]}",
        published=True,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    post = Post(**fields)
    session.add(post)
    session.commit()
    session.refresh(post)
    return post


@pytest.fixture
def sample_posts(test_session: Session, author_profile: Profile) -> List[Post]:
    """Two published posts (one featured), one draft, one by another author."""
    now = datetime.now(timezone.utc)
    posts = [
        make_post(test_session, title="Oldest", slug="oldest-1", created_at=now - timedelta(days=3)),
        make_post(test_session, title="Featured", slug="featured-2", featured=True, created_at=now - timedelta(days=2)),
        make_post(test_session, title="Draft", slug="draft-3", published=False, created_at=now - timedelta(days=1)),
        make_post(test_session, title="Someone Else", slug="someone-else-4", user_id=OTHER_ID, created_at=now),
    ]
    test_session.add(PostStats(post_id=posts[0].id))
    test_session.commit()
    return posts


@pytest.fixture
def image_client() -> MagicMock:
    client = MagicMock(spec=ImageTransformClient)
    client.process.return_value = "https://storage.example.com/blog-images/processed/processed-1.jpg"
    return client


@pytest.fixture
def notification_client() -> MagicMock:
    client = MagicMock(spec=NotificationClient)
    client.send.return_value = {"message": "Notification sent successfully"}
    return client


@pytest.fixture
def notices() -> NoticeChannel:
    return NoticeChannel()


@pytest.fixture
def storage() -> MagicMock:
    storage = MagicMock(spec=ObjectStorage)
    storage.public_url.side_effect = lambda key: f"https://storage.example.com/blog-images/{key}"
    return storage


@pytest.fixture
def client(test_session: Session, image_client, notification_client, storage):
    """TestClient with the database, function clients and storage overridden."""
    from fastapi.testclient import TestClient

    from folio.main import api, app
    from folio.db import get_session
    from folio.services.functions_client import get_image_client, get_notification_client
    from folio.services.storage import get_storage

    def get_test_session():
        yield test_session

    # Overrides live on the mounted API app, which owns the routes
    api.dependency_overrides[get_session] = get_test_session
    api.dependency_overrides[get_image_client] = lambda: image_client
    api.dependency_overrides[get_notification_client] = lambda: notification_client
    api.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    api.dependency_overrides.clear()


def auth_headers_for(identity: str) -> dict:
    from folio.core.jwt import create_access_token

    return {"Authorization": f"Bearer {create_access_token(identity)}"}


@pytest.fixture
def auth_headers() -> dict:
    return auth_headers_for(AUTHOR_ID)


@pytest.fixture
def other_headers() -> dict:
    return auth_headers_for(OTHER_ID)
