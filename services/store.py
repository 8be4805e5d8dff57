from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from services.backend import Backend
from services.change_feed import Channel, ChangeEvent
from services.results import StoreError
from services.session_context import SessionContext

logger = logging.getLogger(__name__)

StoreListener = Callable[["Store"], Union[None, Awaitable[None]]]


class Store:
    """
    Cached view over one table for one caller.

    `mount()` fetches and subscribes to the table's change feed; every change
    notification triggers a full `refresh()`. `unmount()` removes the channel.
    Listeners added with `add_listener` run after each successful refresh.
    A failed refresh keeps the cached rows and records the failure in `error`.
    """

    table: str = ""

    def __init__(self, backend: Backend, context: SessionContext):
        self.backend = backend
        self.context = context
        self.loading = True
        self.error: Optional[StoreError] = None
        self._channel: Optional[Channel] = None
        self._listeners: list[StoreListener] = []

    @property
    def channel_filter(self) -> Optional[dict[str, Any]]:
        return None

    @property
    def mounted(self) -> bool:
        return self._channel is not None

    async def refresh(self) -> Any:
        raise NotImplementedError

    def _fetch_failed(self, what: str) -> None:
        logging.getLogger(type(self).__module__).exception("Error fetching %s", what)
        self.error = StoreError(code="backend", message=f"Failed to fetch {what}")

    async def _on_change(self, change: ChangeEvent) -> None:
        logger.debug("%s: %s on %s, refreshing", type(self).__name__, change.event_type, change.table)
        await self.refresh()

    async def mount(self) -> "Store":
        await self.refresh()
        if self._channel is None:
            self._channel = (
                self.backend.channel(f"{self.table}-changes")
                .on(self.table, self._on_change, event="*", filter=self.channel_filter)
                .subscribe()
            )
        return self

    def unmount(self) -> None:
        if self._channel is not None:
            self.backend.remove_channel(self._channel)
            self._channel = None

    async def __aenter__(self):
        return await self.mount()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def add_listener(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            result = listener(self)
            if inspect.isawaitable(result):
                await result
