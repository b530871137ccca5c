from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from folio.api import deps
from folio.db import get_session
from folio.models import NotificationSettings, Profile
from folio.schemas import NotificationSettingsIn, NotificationSettingsOut, ProfileIn, ProfileOut

router = APIRouter()


@router.get("/me", response_model=ProfileOut)
def read_my_profile(
    session: Session = Depends(get_session),
    identity: str = Depends(deps.get_current_identity),
) -> Any:
    profile = session.get(Profile, identity)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/me", response_model=ProfileOut)
def upsert_my_profile(
    profile_in: ProfileIn,
    session: Session = Depends(get_session),
    identity: str = Depends(deps.get_current_identity),
) -> Any:
    """
    Create or update the caller's profile.

    The first call (right after sign-up) creates the profile together with
    default notification settings.
    """
    now = datetime.now(timezone.utc)
    profile = session.get(Profile, identity)
    if profile is None:
        profile = Profile(id=identity, created_at=now)
        if not session.get(NotificationSettings, identity):
            session.add(NotificationSettings(user_id=identity, updated_at=now))

    profile.full_name = profile_in.full_name
    profile.bio = profile_in.bio
    profile.website = profile_in.website
    profile.avatar_url = profile_in.avatar_url
    if profile_in.email is not None:
        profile.email = profile_in.email
    profile.updated_at = now

    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@router.get("/me/notifications", response_model=NotificationSettingsOut)
def read_my_notification_settings(
    session: Session = Depends(get_session),
    identity: str = Depends(deps.get_current_identity),
) -> Any:
    prefs = session.get(NotificationSettings, identity)
    if not prefs:
        # Nothing stored yet: report the column default
        return NotificationSettingsOut(user_id=identity, email_notifications=True)
    return prefs


@router.put("/me/notifications", response_model=NotificationSettingsOut)
def update_my_notification_settings(
    prefs_in: NotificationSettingsIn,
    session: Session = Depends(get_session),
    identity: str = Depends(deps.get_current_identity),
) -> Any:
    prefs = session.get(NotificationSettings, identity) or NotificationSettings(user_id=identity)
    prefs.email_notifications = prefs_in.email_notifications
    prefs.updated_at = datetime.now(timezone.utc)
    session.add(prefs)
    session.commit()
    session.refresh(prefs)
    return prefs
