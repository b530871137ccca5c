from typing import Generator, List, Optional
import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from folio.core.config import settings
from folio.core import context
from folio.core.jwt import decode_token
from folio.core.notices import Notice, NoticeChannel
from folio.db import get_session
from folio.services.functions_client import (
    ImageTransformClient,
    NotificationClient,
    get_image_client,
    get_notification_client,
)
from folio.services.publishing import PublishingWorkflow

logger = structlog.get_logger(__name__)

# Cookie name for auth token (set by the identity provider's hosted UI)
COOKIE_NAME = "access_token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)


def get_token_from_request(request: Request, header_token: Optional[str] = None) -> Optional[str]:
    """
    Extract token from Authorization header or cookie.
    Priority: Header > Cookie
    """
    if header_token:
        return header_token
    return request.cookies.get(COOKIE_NAME)


def get_current_identity(request: Request, header_token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    Identity id (token subject) of the caller.

    Tokens come from the hosted identity provider; we only verify them.
    """
    token = get_token_from_request(request, header_token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(token)
    subject = payload.get("sub") if payload else None
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    context.bind(identity=subject)
    return subject


def _log_notices(notices: List[Notice]) -> None:
    if notices:
        latest = notices[-1]
        logger.info("Notice", type=latest.type, message=latest.message)


def get_notice_channel() -> Generator[NoticeChannel, None, None]:
    """One channel per request; the collected notices go back in the response."""
    channel = NoticeChannel()
    unsubscribe = channel.subscribe(_log_notices)
    try:
        yield channel
    finally:
        unsubscribe()


def get_publishing_workflow(
    session: Session = Depends(get_session),
    image_client: ImageTransformClient = Depends(get_image_client),
    notification_client: NotificationClient = Depends(get_notification_client),
    notices: NoticeChannel = Depends(get_notice_channel),
) -> PublishingWorkflow:
    return PublishingWorkflow(session, image_client, notification_client, notices)
