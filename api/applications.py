from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_backend, get_session_context, raise_for_error, raise_for_fetch_error, require_profile
from schemas.application import ApplicationCreate, ApplicationRead, ReviewerAssignment, StatusUpdate
from schemas.comment import CommentCreate, CommentRead
from services.application_store import ApplicationStore
from services.backend import Backend
from services.comment_store import CommentStore
from services.session_context import SessionContext
from utils.case import dict_keys_to_camel

router = APIRouter(prefix="/api/applications", tags=["applications"])

def _app_to_response(app: ApplicationRead) -> dict[str, Any]:
    """Serialize application to dict with camelCase for frontend."""
    return dict_keys_to_camel(app.model_dump(mode="json"))


def _comment_to_response(comment: CommentRead) -> dict[str, Any]:
    return dict_keys_to_camel(comment.model_dump(mode="json"))


@router.get("")
async def list_applications(
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(get_session_context),
):
    store = ApplicationStore(backend, context)
    apps = await store.refresh()
    raise_for_fetch_error(store, "fetch applications")
    return [_app_to_response(a) for a in apps]


@router.get("/{application_id}")
async def get_application(
    application_id: str,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await ApplicationStore(backend, context).get(application_id)
    raise_for_error(result, "fetch application")
    return _app_to_response(result.data)


@router.post("", status_code=201)
async def create_application(
    body: ApplicationCreate,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await ApplicationStore(backend, context).create(body.title, body.description)
    raise_for_error(result, "create application")
    return _app_to_response(result.data)


@router.patch("/{application_id}/status")
async def update_application_status(
    application_id: str,
    body: StatusUpdate,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await ApplicationStore(backend, context).update_status(application_id, body.status)
    raise_for_error(result, "update status")
    return _app_to_response(result.data)


@router.patch("/{application_id}/reviewer")
async def assign_reviewer(
    application_id: str,
    body: ReviewerAssignment,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await ApplicationStore(backend, context).assign_reviewer(application_id, body.reviewer_id)
    raise_for_error(result, "assign reviewer")
    return _app_to_response(result.data)


@router.get("/{application_id}/comments")
async def list_comments(
    application_id: str,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    raise_for_error(await ApplicationStore(backend, context).get(application_id), "fetch application")
    store = CommentStore(backend, context, application_id)
    comments = await store.refresh()
    raise_for_fetch_error(store, "fetch comments")
    return [_comment_to_response(c) for c in comments]


@router.post("/{application_id}/comments", status_code=201)
async def create_comment(
    application_id: str,
    body: CommentCreate,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await CommentStore(backend, context, application_id).create(body.comment)
    raise_for_error(result, "add comment")
    return _comment_to_response(result.data)
