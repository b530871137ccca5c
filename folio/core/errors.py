"""
Failure capture for the publishing workflow and the functions.

Nothing here retries. A failed store write, image transform or mail send
is recorded once, as a structured log line tagged with the operation and
the ids of the request, and as a Sentry event when SENTRY_DSN is set. The
caller then answers with its generic notice or error body.

    capture_exception(e, "create_post", author_id=author_id)

    with best_effort("send_publish_notification", post_id=post.id):
        notification_client.send(post.id, author_id)
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator

import structlog

from folio.core import context

logger = structlog.get_logger(__name__)

__all__ = ["init_sentry", "capture_exception", "best_effort"]

_sentry_enabled = False


def init_sentry(dsn: str, environment: str) -> bool:
    """Turn on Sentry reporting. Returns False when no DSN or sentry-sdk is missing."""
    global _sentry_enabled

    if not dsn:
        logger.info("Sentry disabled (no DSN)")
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    except ImportError:
        logger.warning("sentry-sdk not installed, failures are only logged")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=0.1,
        integrations=[FastApiIntegration(transaction_style="endpoint"), SqlalchemyIntegration()],
        before_send=_tag_request_ids,
    )
    _sentry_enabled = True
    logger.info("Sentry initialized", environment=environment)
    return True


def _tag_request_ids(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    ids = context.snapshot()
    identity = ids.pop("identity")
    if identity:
        event.setdefault("user", {})["id"] = identity
    tags = event.setdefault("tags", {})
    for key, value in ids.items():
        if value:
            tags[key] = value
    return event


def capture_exception(exc: BaseException, operation: str, level: str = "error", **fields: Any) -> None:
    """Record ``exc`` as a failure of ``operation``; ``fields`` are ids such as post_id."""
    log = logger.warning if level == "warning" else logger.error
    log("Operation failed", operation=operation, error_type=type(exc).__name__, exc_info=exc, **fields)

    if not _sentry_enabled:
        return

    import sentry_sdk

    with sentry_sdk.push_scope() as scope:
        scope.set_tag("operation", operation)
        for key, value in fields.items():
            if value is not None:
                scope.set_extra(key, value)
        # Group by operation and error type rather than by stack
        scope.fingerprint = [operation, type(exc).__name__]
        scope.level = level
        sentry_sdk.capture_exception(exc)


@contextmanager
def best_effort(operation: str, **fields: Any) -> Iterator[None]:
    """Capture and swallow failures of a step whose failure must not fail the caller."""
    try:
        yield
    except Exception as e:
        capture_exception(e, operation, level="warning", **fields)
