from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_backend, raise_for_error, raise_for_fetch_error, require_profile
from schemas.profile import ProfileRead, RoleUpdate
from services.backend import Backend
from services.profile_store import ProfileStore
from services.session_context import SessionContext
from utils.case import dict_keys_to_camel

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


def _profile_to_response(p: ProfileRead) -> dict[str, Any]:
    return dict_keys_to_camel(p.model_dump(mode="json"))


@router.get("")
async def list_profiles(
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    """All profiles for admins; an empty list for everyone else."""
    store = ProfileStore(backend, context)
    profiles = await store.refresh()
    raise_for_fetch_error(store, "fetch profiles")
    return [_profile_to_response(p) for p in profiles]


@router.get("/reviewers")
async def list_reviewers(
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    store = ProfileStore(backend, context)
    await store.refresh()
    raise_for_fetch_error(store, "fetch profiles")
    return [_profile_to_response(p) for p in store.get_reviewers()]


@router.get("/me")
async def get_my_profile(context: SessionContext = Depends(require_profile)):
    return _profile_to_response(context.profile)


@router.patch("/{profile_id}/role")
async def update_user_role(
    profile_id: str,
    body: RoleUpdate,
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(require_profile),
):
    result = await ProfileStore(backend, context).update_user_role(profile_id, body.role)
    raise_for_error(result, "update user role")
    return _profile_to_response(result.data)
