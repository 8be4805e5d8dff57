from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models import ApplicationComment
from schemas.comment import CommentRead
from services.application_store import find_visible_application
from services.results import MutationResult
from services.store import Store

logger = logging.getLogger(__name__)


class CommentStore(Store):
    """Comments on a single application, oldest first. Comments are never edited or removed."""

    table = "application_comments"

    def __init__(self, backend, context, application_id: str):
        super().__init__(backend, context)
        self.application_id = application_id
        self.comments: list[CommentRead] = []

    @property
    def channel_filter(self) -> Optional[dict[str, Any]]:
        return {"application_id": self.application_id}

    @property
    def can_add_comments(self) -> bool:
        return self.context.has_role("admin", "reviewer")

    async def refresh(self) -> list[CommentRead]:
        try:
            async with self.backend.session() as db:
                result = await db.execute(
                    select(ApplicationComment)
                    .options(selectinload(ApplicationComment.reviewer))
                    .where(ApplicationComment.application_id == self.application_id)
                    .order_by(ApplicationComment.created_at.asc())
                )
                fetched = [CommentRead.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError:
            self._fetch_failed("comments")
            return self.comments
        finally:
            self.loading = False
        self.comments = fetched
        self.error = None
        await self._notify()
        return fetched

    async def create(self, comment: str) -> MutationResult[CommentRead]:
        if not self.can_add_comments:
            return MutationResult.failure("forbidden", "Only reviewers and admins can add comments")
        text = (comment or "").strip()
        if not text:
            return MutationResult.failure("invalid", "Please enter a comment")

        try:
            async with self.backend.session() as db:
                app = await find_visible_application(db, self.context.profile, self.application_id)
                if app is None:
                    return MutationResult.failure("not_found", "Application not found")
                row = ApplicationComment(
                    id=f"cmt-{uuid.uuid4().hex[:12]}",
                    application_id=self.application_id,
                    reviewer_id=self.context.profile.id,
                    comment=text,
                )
                db.add(row)
                await db.flush()
                await db.refresh(row, ["reviewer"])
                created = CommentRead.model_validate(row)
        except SQLAlchemyError:
            logger.exception("Error adding comment to application %s", self.application_id)
            return MutationResult.failure("backend", "Failed to add comment")

        await self.refresh()
        return MutationResult.success(created)
