from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models import Application, Profile
from schemas.application import STATUSES, ApplicationRead
from schemas.profile import ProfileRead
from services.results import MutationResult
from services.store import Store

logger = logging.getLogger(__name__)


def scope_applications(query: Select, profile: ProfileRead) -> Select:
    """Restrict an Application query to the rows `profile` may see."""
    if profile.role == "applicant":
        return query.where(Application.applicant_id == profile.id)
    if profile.role == "reviewer":
        return query.where(Application.assigned_reviewer_id == profile.id)
    # Admin sees every application
    return query


def _with_people(query: Select) -> Select:
    return query.options(
        selectinload(Application.applicant),
        selectinload(Application.assigned_reviewer),
    )


async def find_visible_application(
    db: AsyncSession, profile: ProfileRead, application_id: str
) -> Optional[Application]:
    query = scope_applications(select(Application).where(Application.id == application_id), profile)
    result = await db.execute(_with_people(query))
    return result.scalar_one_or_none()


class ApplicationStore(Store):
    table = "applications"

    def __init__(self, backend, context):
        super().__init__(backend, context)
        self.applications: list[ApplicationRead] = []

    async def refresh(self) -> list[ApplicationRead]:
        profile = self.context.profile
        if profile is None:
            self.loading = False
            return self.applications
        try:
            async with self.backend.session() as db:
                query = scope_applications(_with_people(select(Application)), profile)
                result = await db.execute(query.order_by(Application.submitted_at.desc()))
                fetched = [ApplicationRead.model_validate(a) for a in result.scalars().all()]
        except SQLAlchemyError:
            self._fetch_failed("applications")
            return self.applications
        finally:
            self.loading = False
        self.applications = fetched
        self.error = None
        await self._notify()
        return fetched

    async def get(self, application_id: str) -> MutationResult[ApplicationRead]:
        """One application, if the caller may see it."""
        profile = self.context.profile
        if profile is None:
            return MutationResult.failure("not_found", "Application not found")
        try:
            async with self.backend.session() as db:
                app = await find_visible_application(db, profile, application_id)
                found = ApplicationRead.model_validate(app) if app else None
        except SQLAlchemyError:
            logger.exception("Error fetching application %s", application_id)
            return MutationResult.failure("backend", "Failed to fetch application")
        if found is None:
            return MutationResult.failure("not_found", "Application not found")
        return MutationResult.success(found)

    async def create(self, title: str, description: str) -> MutationResult[ApplicationRead]:
        if not self.context.has_role("applicant"):
            return MutationResult.failure("forbidden", "Only applicants can submit applications")
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            return MutationResult.failure("invalid", "Please fill in all fields")

        try:
            async with self.backend.session() as db:
                app = Application(
                    id=f"app-{uuid.uuid4().hex[:12]}",
                    applicant_id=self.context.profile.id,
                    title=title,
                    description=description,
                    status="pending",
                    assigned_reviewer_id=None,
                )
                db.add(app)
                await db.flush()
                await db.refresh(app, ["applicant", "assigned_reviewer"])
                created = ApplicationRead.model_validate(app)
        except SQLAlchemyError:
            logger.exception("Error creating application")
            return MutationResult.failure("backend", "Failed to create application")

        logger.info("Application %s submitted by %s", created.id, created.applicant_id)
        await self.refresh()
        return MutationResult.success(created)

    async def update_status(self, application_id: str, status: str) -> MutationResult[ApplicationRead]:
        if not self.context.has_role("admin", "reviewer"):
            return MutationResult.failure("forbidden", "Only reviewers and admins can update status")
        if status not in STATUSES:
            return MutationResult.failure("invalid", f"Unknown status: {status}")

        try:
            async with self.backend.session() as db:
                app = await find_visible_application(db, self.context.profile, application_id)
                if app is None:
                    return MutationResult.failure("not_found", "Application not found")
                # Any status may follow any other
                app.status = status
                await db.flush()
                updated = ApplicationRead.model_validate(app)
        except SQLAlchemyError:
            logger.exception("Error updating status of application %s", application_id)
            return MutationResult.failure("backend", "Failed to update status")

        logger.info("Application %s set to %s by %s", application_id, status, self.context.profile.id)
        await self.refresh()
        return MutationResult.success(updated)

    async def assign_reviewer(self, application_id: str, reviewer_id: str) -> MutationResult[ApplicationRead]:
        if not self.context.has_role("admin"):
            return MutationResult.failure("forbidden", "Only admins can assign reviewers")

        try:
            async with self.backend.session() as db:
                app = await find_visible_application(db, self.context.profile, application_id)
                if app is None:
                    return MutationResult.failure("not_found", "Application not found")
                reviewer = await db.get(Profile, reviewer_id)
                if reviewer is None or reviewer.role != "reviewer":
                    return MutationResult.failure("invalid", "Assignee must be a reviewer")
                app.assigned_reviewer_id = reviewer.id
                await db.flush()
                await db.refresh(app, ["assigned_reviewer"])
                updated = ApplicationRead.model_validate(app)
        except SQLAlchemyError:
            logger.exception("Error assigning reviewer to application %s", application_id)
            return MutationResult.failure("backend", "Failed to assign reviewer")

        logger.info("Application %s assigned to reviewer %s", application_id, reviewer_id)
        await self.refresh()
        return MutationResult.success(updated)
