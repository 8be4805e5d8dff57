"""
Live updates over a WebSocket.

The connection mounts the caller's stores; each re-fetch triggered by the
change feed pushes a fresh snapshot to the client. Closing the socket
unmounts the stores and removes their channels.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from api.deps import anon_key_matches, get_backend
from services.application_store import ApplicationStore
from services.backend import Backend
from services.comment_store import CommentStore
from services.session_context import load_session_context
from services.store import Store
from utils.case import dict_keys_to_camel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["live"])


@router.websocket("/live")
async def live_updates(
    websocket: WebSocket,
    user_id: str,
    application_id: Optional[str] = None,
    apikey: Optional[str] = None,
    backend: Backend = Depends(get_backend),
):
    if not anon_key_matches(apikey):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    context = await load_session_context(backend, user_id)
    if context.profile is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    applications = ApplicationStore(backend, context)
    stores: list[Store] = [applications]
    if application_id:
        found = await applications.get(application_id)
        if not found.ok:
            code = (
                status.WS_1011_INTERNAL_ERROR
                if found.error.code == "backend"
                else status.WS_1008_POLICY_VIOLATION
            )
            await websocket.close(code=code)
            return
        stores.append(CommentStore(backend, context, application_id))

    await websocket.accept()

    async def push_applications(store: ApplicationStore) -> None:
        await websocket.send_json({
            "type": "applications",
            "data": [dict_keys_to_camel(a.model_dump(mode="json")) for a in store.applications],
        })

    async def push_comments(store: CommentStore) -> None:
        await websocket.send_json({
            "type": "comments",
            "applicationId": store.application_id,
            "data": [dict_keys_to_camel(c.model_dump(mode="json")) for c in store.comments],
        })

    applications.add_listener(push_applications)
    for store in stores[1:]:
        store.add_listener(push_comments)

    try:
        for store in stores:
            await store.mount()
        # Client messages carry nothing; reading keeps the disconnect observable.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Live connection for profile %s closed", context.profile.id)
    finally:
        for store in stores:
            store.unmount()
