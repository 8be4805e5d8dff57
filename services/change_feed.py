"""
In-process change-notification channels.

A committed database session publishes one ChangeEvent per inserted, updated
or deleted row. Channels hold table-scoped bindings (optionally filtered on
column equality); matching callbacks run one after another on the event loop.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Optional, Union

logger = logging.getLogger(__name__)

EventType = Literal["INSERT", "UPDATE", "DELETE"]
ChangeCallback = Callable[["ChangeEvent"], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: EventType
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)

    @property
    def record(self) -> dict[str, Any]:
        """Row values used for filtering: the new row, or the old one for deletes."""
        return self.old if self.event_type == "DELETE" else self.new


@dataclass
class _Binding:
    table: str
    callback: ChangeCallback
    event: str = "*"
    filter: Optional[dict[str, Any]] = None

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        if self.event != "*" and self.event != change.event_type:
            return False
        if self.filter:
            record = change.record
            for column, value in self.filter.items():
                if column not in record or str(record[column]) != str(value):
                    return False
        return True


class Channel:
    def __init__(self, feed: "ChangeFeed", name: str):
        self.feed = feed
        self.name = name
        self._bindings: list[_Binding] = []
        self.subscribed = False

    def on(
        self,
        table: str,
        callback: ChangeCallback,
        event: str = "*",
        filter: Optional[dict[str, Any]] = None,
    ) -> "Channel":
        if event not in ("*", "INSERT", "UPDATE", "DELETE"):
            raise ValueError(f"Unknown change event: {event}")
        self._bindings.append(_Binding(table=table, callback=callback, event=event, filter=filter))
        return self

    def subscribe(self) -> "Channel":
        self.feed._attach(self)
        self.subscribed = True
        return self

    def unsubscribe(self) -> None:
        self.feed.remove_channel(self)

    async def _deliver(self, change: ChangeEvent) -> None:
        for binding in list(self._bindings):
            if not binding.matches(change):
                continue
            try:
                result = binding.callback(change)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Change callback on channel %s failed for %s %s",
                    self.name, change.event_type, change.table,
                )


class ChangeFeed:
    def __init__(self) -> None:
        self._channels: list[Channel] = []

    def channel(self, name: str) -> Channel:
        return Channel(self, name)

    def _attach(self, channel: Channel) -> None:
        if channel not in self._channels:
            self._channels.append(channel)
            logger.debug("Channel %s subscribed", channel.name)

    def remove_channel(self, channel: Channel) -> None:
        if channel in self._channels:
            self._channels.remove(channel)
            logger.debug("Channel %s removed", channel.name)
        channel.subscribed = False

    @property
    def channels(self) -> list[Channel]:
        return list(self._channels)

    async def publish(self, change: ChangeEvent) -> None:
        # Snapshot: callbacks may subscribe or remove channels while running.
        for channel in list(self._channels):
            if channel.subscribed:
                await channel._deliver(change)
