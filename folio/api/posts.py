from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from folio.api import deps
from folio.core.notices import NoticeChannel
from folio.db import get_session
from folio.models import Post, Profile
from folio.schemas import (
    AuthorOut,
    HomeFeedOut,
    PostCreate,
    PostOut,
    PostStatsOut,
    PostUpdate,
    PostWithAuthorOut,
    PostWorkflowOut,
)
from folio.services import stats as stats_service
from folio.services.publishing import (
    NotPostOwner,
    PostNotFound,
    PublishingWorkflow,
    WorkflowError,
    WorkflowResult,
    get_published_post,
    home_feed,
    list_author_posts,
)

router = APIRouter()

StatField = Literal["views", "likes", "shares"]


def _with_author(post: Post, profile: Optional[Profile]) -> PostWithAuthorOut:
    out = PostWithAuthorOut.model_validate(post, from_attributes=True)
    out.author = AuthorOut.model_validate(profile) if profile else None
    return out


def _workflow_response(result: WorkflowResult, notices: NoticeChannel) -> PostWorkflowOut:
    return PostWorkflowOut(
        post=PostOut.model_validate(result.post) if result.post else None,
        redirect_to=result.redirect_to,
        notices=[n.to_dict() for n in notices.active()],
    )


def _workflow_error_response(error: WorkflowError, notices: NoticeChannel) -> JSONResponse:
    if isinstance(error, NotPostOwner):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, PostNotFound):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        # A remote call (store, image or notification function) failed
        status_code = status.HTTP_502_BAD_GATEWAY
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": str(error),
            "redirect_to": error.redirect_to,
            "notices": [n.to_dict() for n in notices.active()],
        },
    )


@router.get("/feed", response_model=HomeFeedOut)
def read_home_feed(session: Session = Depends(get_session)) -> Any:
    """Up to three featured and three recent published posts."""
    featured, recent = home_feed(session)
    return HomeFeedOut(
        featured=[_with_author(p, a) for p, a in featured],
        recent=[_with_author(p, a) for p, a in recent],
    )


@router.get("/mine", response_model=List[PostOut])
def read_my_posts(
    session: Session = Depends(get_session),
    identity: str = Depends(deps.get_current_identity),
) -> Any:
    """Dashboard: the caller's posts, drafts included."""
    return list_author_posts(session, identity)


@router.get("/by-slug/{slug}", response_model=PostWithAuthorOut)
def read_post_by_slug(slug: str, session: Session = Depends(get_session)) -> Any:
    found = get_published_post(session, slug)
    if not found:
        raise HTTPException(status_code=404, detail="Post not found")
    return _with_author(*found)


@router.post("", response_model=PostWorkflowOut, status_code=status.HTTP_201_CREATED)
def create_post(
    form: PostCreate,
    identity: str = Depends(deps.get_current_identity),
    workflow: PublishingWorkflow = Depends(deps.get_publishing_workflow),
) -> Any:
    """Compose workflow: process cover, insert post and stats, notify when published."""
    try:
        result = workflow.create_post(identity, form)
    except WorkflowError as e:
        return _workflow_error_response(e, workflow.notices)
    return _workflow_response(result, workflow.notices)


@router.get("/{post_id}", response_model=PostOut, responses={403: {}, 404: {}})
def read_post_for_edit(
    post_id: str,
    identity: str = Depends(deps.get_current_identity),
    workflow: PublishingWorkflow = Depends(deps.get_publishing_workflow),
) -> Any:
    try:
        return workflow.load_owned_post(identity, post_id)
    except WorkflowError as e:
        return _workflow_error_response(e, workflow.notices)


@router.put("/{post_id}", response_model=PostWorkflowOut)
def update_post(
    post_id: str,
    form: PostUpdate,
    identity: str = Depends(deps.get_current_identity),
    workflow: PublishingWorkflow = Depends(deps.get_publishing_workflow),
) -> Any:
    """Edit workflow: owner only, no slug or stats changes."""
    try:
        result = workflow.update_post(identity, post_id, form)
    except WorkflowError as e:
        return _workflow_error_response(e, workflow.notices)
    return _workflow_response(result, workflow.notices)


@router.delete("/{post_id}", response_model=PostWorkflowOut)
def delete_post(
    post_id: str,
    identity: str = Depends(deps.get_current_identity),
    workflow: PublishingWorkflow = Depends(deps.get_publishing_workflow),
) -> Any:
    try:
        result = workflow.delete_post(identity, post_id)
    except WorkflowError as e:
        return _workflow_error_response(e, workflow.notices)
    return _workflow_response(result, workflow.notices)


@router.post("/{post_id}/stats/{field}", response_model=PostStatsOut)
def increment_post_stat(
    post_id: str,
    field: StatField,
    session: Session = Depends(get_session),
) -> Any:
    if not session.get(Post, post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return stats_service.increment_stat(session, post_id, field)
