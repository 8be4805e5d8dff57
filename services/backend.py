from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import event, inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session

from services.change_feed import Channel, ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)


def _row(obj: Any) -> dict[str, Any]:
    """Loaded column values of a mapped object, keyed by attribute name."""
    state = inspect(obj)
    return {
        attr.key: state.dict[attr.key]
        for attr in state.mapper.column_attrs
        if attr.key in state.dict
    }


def _table(obj: Any) -> str:
    return inspect(obj).mapper.local_table.name


def _capture(session: Session) -> list[ChangeEvent]:
    changes: list[ChangeEvent] = []
    for obj in session.new:
        changes.append(ChangeEvent(table=_table(obj), event_type="INSERT", new=_row(obj)))
    for obj in session.dirty:
        if not session.is_modified(obj):
            continue
        state = inspect(obj)
        # Primary key plus the previous value of every changed column
        old: dict[str, Any] = {}
        for attr in state.mapper.column_attrs:
            history = state.attrs[attr.key].history
            if history.deleted:
                old[attr.key] = history.deleted[0]
            elif attr.columns[0].primary_key and attr.key in state.dict:
                old[attr.key] = state.dict[attr.key]
        changes.append(ChangeEvent(table=_table(obj), event_type="UPDATE", new=_row(obj), old=old))
    for obj in session.deleted:
        changes.append(ChangeEvent(table=_table(obj), event_type="DELETE", old=_row(obj)))
    return changes


class Backend:
    """
    Handle to the relational store and its change feed.

    Stores use `session()` for queries and mutations and `channel()` for
    change subscriptions. Row changes flushed inside a session are published
    to the feed once that session has committed.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], feed: Optional[ChangeFeed] = None):
        self._session_factory = session_factory
        self.feed = feed or ChangeFeed()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        changes: list[ChangeEvent] = []

        def _collect(session: Session, flush_context: Any) -> None:
            changes.extend(_capture(session))

        async with self._session_factory() as db:
            sync_session = db.sync_session
            event.listen(sync_session, "after_flush", _collect)
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            finally:
                event.remove(sync_session, "after_flush", _collect)

        for change in changes:
            logger.debug("Publishing %s on %s", change.event_type, change.table)
            await self.feed.publish(change)

    def channel(self, name: str) -> Channel:
        return self.feed.channel(name)

    def remove_channel(self, channel: Channel) -> None:
        self.feed.remove_channel(channel)
