"""
send-notification function.

POST {"post_id": "...", "user_id": "..."} -> {"message": "..."}

Emails the author that their post is live, but only when the post, the
author's profile (with an email address) and the author's notification
settings all exist and email notifications are switched on. Otherwise it
answers "Notification not required" and sends nothing.
"""

from typing import Callable, Optional

import structlog
from fastapi import FastAPI, Request
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from folio.core.config import settings
from folio.core.errors import capture_exception
from folio.core.logging_config import configure_logging
from folio.functions.common import json_response, preflight_response
from folio.models import NotificationSettings, Post, Profile
from folio.schemas import NotificationRequest
from folio.services.email import Mailer, get_mailer

logger = structlog.get_logger(__name__)

NOT_REQUIRED = "Notification not required"
SENT = "Notification sent successfully"
ERROR_MESSAGE = "Failed to send notification"


class NotificationHandler:
    def __init__(self, session_factory: Callable[[], Session], mailer: Mailer, public_url: str):
        self._session_factory = session_factory
        self.mailer = mailer
        self.public_url = public_url.rstrip("/")

    def handle(self, post_id: str, user_id: str) -> str:
        with self._session_factory() as session:
            post = session.get(Post, post_id)
            profile = session.get(Profile, user_id)
            prefs = session.get(NotificationSettings, user_id)

            if not post or not profile or not profile.email or not prefs or not prefs.email_notifications:
                logger.info(
                    "Publish notification skipped",
                    post_id=post_id,
                    user_id=user_id,
                    has_post=post is not None,
                    has_profile=profile is not None,
                    enabled=bool(prefs and prefs.email_notifications),
                )
                return NOT_REQUIRED

            to_email, full_name = profile.email, profile.full_name
            title, slug = post.title, post.slug

        self.mailer.send_post_published(to_email, full_name, title, f"{self.public_url}/post/{slug}")
        return SENT


def create_app(handler: Optional[NotificationHandler] = None) -> FastAPI:
    """Build the function app; without a handler one is built from settings on first use."""
    configure_logging()
    app = FastAPI(title="send-notification")
    state = {"handler": handler}

    def get_handler() -> NotificationHandler:
        if state["handler"] is None:
            from folio.db import session_factory

            state["handler"] = NotificationHandler(session_factory, get_mailer(), settings.PUBLIC_URL)
        return state["handler"]

    @app.options("/")
    def preflight():
        return preflight_response()

    @app.post("/")
    async def send_notification(request: Request):
        try:
            payload = NotificationRequest.model_validate(await request.json())
            message = await run_in_threadpool(get_handler().handle, payload.post_id, payload.user_id)
        except Exception as e:
            capture_exception(e, "send_notification")
            return json_response({"error": ERROR_MESSAGE}, status_code=500)

        return json_response({"message": message})

    return app
