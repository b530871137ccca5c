"""
Post publishing workflow.

Compose:
    1. cover image (if any) -> image function -> replaced by processed URL
    2. slug from title + random suffix (retried on a unique-index conflict)
    3. insert post
    4. insert zero-valued stats row (best effort, no rollback of the post)
    5. link categories
    6. published -> one call to the notification function (best effort)

Edit updates the post row only. It notifies exactly when the edit moves the
post from draft to published; republishing an already published post,
unpublishing, or saving a draft never notifies.

Every outcome is also published as a user notice on the workflow's
NoticeChannel.
"""

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import delete
from sqlmodel import Session, select, desc

from folio.core.config import settings
from folio.core.errors import best_effort, capture_exception
from folio.core.notices import NoticeChannel
from folio.core.slug import generate_slug
from folio.models import Category, Post, PostCategory, PostStats, Profile
from folio.schemas import PostCreate, PostUpdate
from folio.services.functions_client import (
    FunctionCallError,
    ImageTransformClient,
    NotificationClient,
)

logger = structlog.get_logger(__name__)

DASHBOARD = "/dashboard"

PUBLISHED_NOTICE = "Post published successfully!"
DRAFT_NOTICE = "Post saved as draft!"
UPDATED_NOTICE = "Post updated successfully!"
DELETED_NOTICE = "Post deleted successfully"
CREATE_FAILED = "Failed to create post. Please try again."
UPDATE_FAILED = "Failed to update post. Please try again."
DELETE_FAILED = "Failed to delete post. Please try again."
LOAD_FAILED = "Failed to load post. Please try again."
NOT_OWNER = "You do not have permission to edit this post"


class WorkflowError(Exception):
    """A workflow step failed; ``str(exc)`` is the user-facing message."""

    redirect_to: Optional[str] = None


class PostNotFound(WorkflowError):
    redirect_to = DASHBOARD


class NotPostOwner(WorkflowError):
    redirect_to = DASHBOARD


class SlugCollisionError(WorkflowError):
    pass


@dataclass
class WorkflowResult:
    post: Optional[Post]
    redirect_to: Optional[str] = DASHBOARD


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PublishingWorkflow:
    def __init__(
        self,
        session: Session,
        image_client: ImageTransformClient,
        notification_client: NotificationClient,
        notices: NoticeChannel,
        slug_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.image_client = image_client
        self.notification_client = notification_client
        self.notices = notices
        self.slug_attempts = slug_attempts or settings.SLUG_MAX_ATTEMPTS
        self.rng = rng

    # ---- compose ---------------------------------------------------------

    def create_post(self, author_id: str, form: PostCreate) -> WorkflowResult:
        try:
            cover_image = form.cover_image
            if cover_image:
                cover_image = self.image_client.process(cover_image)
            post = self._insert_post(author_id, form, cover_image)
        except (FunctionCallError, SQLAlchemyError, SlugCollisionError) as e:
            self.session.rollback()
            capture_exception(e, "create_post", author_id=author_id)
            self.notices.publish(CREATE_FAILED, type="error")
            raise WorkflowError(CREATE_FAILED) from e

        self._init_stats(post.id)
        if form.category_ids:
            self._link_categories(post.id, form.category_ids)
        if form.published:
            self._notify(post.id, author_id)

        logger.info("Post created", post_id=post.id, slug=post.slug, published=post.published)
        self.notices.publish(PUBLISHED_NOTICE if form.published else DRAFT_NOTICE)
        return WorkflowResult(post=post)

    def _insert_post(self, author_id: str, form: PostCreate, cover_image: Optional[str]) -> Post:
        for attempt in range(1, self.slug_attempts + 1):
            now = _utc_now()
            post = Post(
                title=form.title,
                content=form.content,
                excerpt=form.excerpt,
                cover_image=cover_image,
                user_id=author_id,
                slug=generate_slug(form.title, self.rng),
                published=form.published,
                created_at=now,
                updated_at=now,
            )
            self.session.add(post)
            try:
                self.session.commit()
            except IntegrityError:
                # slug is the only unique column a fresh uuid can clash on
                self.session.rollback()
                logger.warning("Slug collision", slug=post.slug, attempt=attempt)
                continue
            self.session.refresh(post)
            return post

        raise SlugCollisionError(f"No free slug for {form.title!r} after {self.slug_attempts} attempts")

    def _init_stats(self, post_id: str) -> None:
        now = _utc_now()
        try:
            self.session.add(PostStats(post_id=post_id, created_at=now, updated_at=now))
            self.session.commit()
        except SQLAlchemyError as e:
            # The post stays without a stats row; increments create it later
            self.session.rollback()
            capture_exception(e, "init_post_stats", level="warning", post_id=post_id)

    def _link_categories(self, post_id: str, category_ids: List[str]) -> None:
        try:
            known = self.session.exec(select(Category.id).where(Category.id.in_(category_ids))).all()
            for category_id in dict.fromkeys(known):
                self.session.add(PostCategory(post_id=post_id, category_id=category_id))
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            capture_exception(e, "link_categories", level="warning", post_id=post_id)

    def _notify(self, post_id: str, author_id: str) -> None:
        with best_effort("send_publish_notification", post_id=post_id, author_id=author_id):
            self.notification_client.send(post_id, author_id)

    # ---- edit / delete ---------------------------------------------------

    def load_owned_post(self, user_id: str, post_id: str) -> Post:
        post = self.session.get(Post, post_id)
        if post is None:
            self.notices.publish(LOAD_FAILED, type="error")
            raise PostNotFound(LOAD_FAILED)
        if post.user_id != user_id:
            logger.warning("Edit rejected, not owner", post_id=post_id, user_id=user_id)
            self.notices.publish(NOT_OWNER, type="error")
            raise NotPostOwner(NOT_OWNER)
        return post

    def update_post(self, editor_id: str, post_id: str, form: PostUpdate) -> WorkflowResult:
        post = self.load_owned_post(editor_id, post_id)
        was_published = post.published

        try:
            post.title = form.title
            post.content = form.content
            post.excerpt = form.excerpt
            post.cover_image = form.cover_image
            post.published = form.published
            post.updated_at = _utc_now()
            self.session.add(post)
            self.session.commit()
            self.session.refresh(post)
        except SQLAlchemyError as e:
            self.session.rollback()
            capture_exception(e, "update_post", post_id=post_id)
            self.notices.publish(UPDATE_FAILED, type="error")
            raise WorkflowError(UPDATE_FAILED) from e

        if form.published and not was_published:
            self._notify(post.id, editor_id)

        self.notices.publish(UPDATED_NOTICE)
        return WorkflowResult(post=post)

    def delete_post(self, owner_id: str, post_id: str) -> WorkflowResult:
        self.load_owned_post(owner_id, post_id)
        try:
            self.session.execute(delete(PostCategory).where(PostCategory.post_id == post_id))
            self.session.execute(delete(PostStats).where(PostStats.post_id == post_id))
            self.session.execute(delete(Post).where(Post.id == post_id))
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            capture_exception(e, "delete_post", post_id=post_id)
            self.notices.publish(DELETE_FAILED, type="error")
            raise WorkflowError(DELETE_FAILED) from e

        logger.info("Post deleted", post_id=post_id)
        self.notices.publish(DELETED_NOTICE)
        return WorkflowResult(post=None, redirect_to=None)


# ---- read side -----------------------------------------------------------

PostWithAuthor = Tuple[Post, Optional[Profile]]


def list_author_posts(session: Session, author_id: str) -> List[Post]:
    """Dashboard listing: all of an author's posts, drafts included, newest first."""
    return list(
        session.exec(select(Post).where(Post.user_id == author_id).order_by(desc(Post.created_at))).all()
    )


def _with_authors(session: Session, posts: List[Post]) -> List[PostWithAuthor]:
    author_ids = {p.user_id for p in posts}
    profiles = {}
    if author_ids:
        profiles = {p.id: p for p in session.exec(select(Profile).where(Profile.id.in_(author_ids))).all()}
    return [(post, profiles.get(post.user_id)) for post in posts]


def get_published_post(session: Session, slug: str) -> Optional[PostWithAuthor]:
    post = session.exec(select(Post).where(Post.slug == slug, Post.published == True)).first()  # noqa: E712
    if post is None:
        return None
    return post, session.get(Profile, post.user_id)


def home_feed(session: Session, limit: int = 3) -> Tuple[List[PostWithAuthor], List[PostWithAuthor]]:
    """Featured and recent published posts for the home page."""
    published = select(Post).where(Post.published == True)  # noqa: E712
    featured = session.exec(
        published.where(Post.featured == True).order_by(desc(Post.created_at)).limit(limit)  # noqa: E712
    ).all()
    recent = session.exec(published.order_by(desc(Post.created_at)).limit(limit)).all()
    return _with_authors(session, list(featured)), _with_authors(session, list(recent))
