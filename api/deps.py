from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException

from config import settings
from database import AsyncSessionLocal
from services.backend import Backend
from services.results import MutationResult, StoreError
from services.session_context import SessionContext, load_session_context
from services.store import Store

logger = logging.getLogger(__name__)

backend = Backend(AsyncSessionLocal)

_STATUS_BY_CODE = {
    "forbidden": 403,
    "invalid": 400,
    "not_found": 404,
    "backend": 500,
}


def get_backend() -> Backend:
    return backend


def anon_key_matches(apikey: Optional[str]) -> bool:
    """True when no anonymous key is configured or `apikey` equals it."""
    if not settings.anon_key:
        return True
    return bool(apikey) and secrets.compare_digest(apikey, settings.anon_key)


async def verify_apikey(apikey: Optional[str] = Header(None)) -> None:
    """Reject requests without the anonymous key when one is configured."""
    if not anon_key_matches(apikey):
        raise HTTPException(status_code=401, detail="Invalid API key")


async def get_session_context(
    x_user_id: Optional[str] = Header(None),
    backend: Backend = Depends(get_backend),
) -> SessionContext:
    return await load_session_context(backend, x_user_id)


async def require_profile(context: SessionContext = Depends(get_session_context)) -> SessionContext:
    if context.profile is None:
        raise HTTPException(status_code=403, detail="No profile for the current user")
    return context


def raise_for_error(result: MutationResult, action: Optional[str] = None) -> None:
    """
    Turn a failed store result into an HTTP error.

    Backend failures answer "Failed to {action}"; without an action the
    store's own message is used.
    """
    if result.ok:
        return
    error: StoreError = result.error
    logger.warning("%s: %s (%s)", action or "Request failed", error.message, error.code)
    detail = f"Failed to {action}" if error.code == "backend" and action else error.message
    raise HTTPException(status_code=_STATUS_BY_CODE[error.code], detail=detail)


def raise_for_fetch_error(store: Store, action: str) -> None:
    """A store whose last refresh failed answers 500 instead of serving stale rows."""
    if store.error is not None:
        raise_for_error(MutationResult(error=store.error), action)
