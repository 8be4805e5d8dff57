from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models import Profile
from schemas.profile import ROLES, ProfileRead
from services.results import MutationResult
from services.store import Store

logger = logging.getLogger(__name__)


class ProfileStore(Store):
    """All user profiles, visible to admins only."""

    table = "profiles"

    def __init__(self, backend, context):
        super().__init__(backend, context)
        self.profiles: list[ProfileRead] = []

    async def refresh(self) -> list[ProfileRead]:
        if not self.context.has_role("admin"):
            self.profiles = []
            self.loading = False
            return self.profiles
        try:
            async with self.backend.session() as db:
                result = await db.execute(select(Profile).order_by(Profile.created_at.desc()))
                fetched = [ProfileRead.model_validate(p) for p in result.scalars().all()]
        except SQLAlchemyError:
            self._fetch_failed("profiles")
            return self.profiles
        finally:
            self.loading = False
        self.profiles = fetched
        self.error = None
        await self._notify()
        return fetched

    def get_reviewers(self) -> list[ProfileRead]:
        return [p for p in self.profiles if p.role == "reviewer"]

    async def update_user_role(self, profile_id: str, role: str) -> MutationResult[ProfileRead]:
        if not self.context.has_role("admin"):
            return MutationResult.failure("forbidden", "Only admins can change roles")
        if role not in ROLES:
            return MutationResult.failure("invalid", f"Unknown role: {role}")

        try:
            async with self.backend.session() as db:
                profile = await db.get(Profile, profile_id)
                if profile is None:
                    return MutationResult.failure("not_found", "Profile not found")
                profile.role = role
                await db.flush()
                updated = ProfileRead.model_validate(profile)
        except SQLAlchemyError:
            logger.exception("Error updating role of profile %s", profile_id)
            return MutationResult.failure("backend", "Failed to update user role")

        logger.info("Profile %s is now %s", profile_id, role)
        await self.refresh()
        return MutationResult.success(updated)
