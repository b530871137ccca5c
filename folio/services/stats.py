"""
Per-post view/like/share counters.

Increments are a single ``UPDATE ... SET field = field + 1`` so two
concurrent callers can never overwrite each other's increment. When the
post has no stats row yet, one is inserted with the field set to 1; if a
concurrent caller inserts first, the insert fails on the primary key and
we fall back to the update.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from folio.models.post import PostStats, STAT_FIELDS

logger = structlog.get_logger(__name__)


def _increment_statement(post_id: str, field: str):
    column = getattr(PostStats, field)
    return (
        update(PostStats)
        .where(PostStats.post_id == post_id)
        .values({field: column + 1, "updated_at": datetime.now(timezone.utc)})
    )


def increment_stat(session: Session, post_id: str, field: str) -> PostStats:
    """Add one to ``field`` (views, likes or shares) for ``post_id``."""
    if field not in STAT_FIELDS:
        raise ValueError(f"Unknown stat field: {field!r}")

    result = session.execute(_increment_statement(post_id, field))
    if result.rowcount == 0:
        try:
            session.add(PostStats(post_id=post_id, **{field: 1}))
            session.commit()
        except IntegrityError:
            # Lost the insert race; the row exists now
            session.rollback()
            logger.info("Stats row created concurrently, retrying update", post_id=post_id, field=field)
            session.execute(_increment_statement(post_id, field))
            session.commit()
    else:
        session.commit()

    return session.get(PostStats, post_id, populate_existing=True)


def get_stats(session: Session, post_id: str) -> Optional[PostStats]:
    return session.get(PostStats, post_id)
