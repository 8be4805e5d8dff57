"""
Shared fixtures for the async store tests: a fresh in-memory database per test,
a Backend over it, and one profile per role.
"""
import unittest
import uuid

from database import build_engine, build_sessionmaker, init_db
from models import Profile
from schemas.profile import ProfileRead
from services.application_store import ApplicationStore
from services.backend import Backend
from services.session_context import SessionContext


class BackendTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.engine = build_engine("sqlite+aiosqlite:///:memory:")
        await init_db(self.engine)
        self.backend = Backend(build_sessionmaker(self.engine))
        self.admin = await self.add_profile("admin", "Ada", "Admin")
        self.reviewer = await self.add_profile("reviewer", "Rita", "Reviewer")
        self.applicant = await self.add_profile("applicant", "Alan", "Applicant")

    async def asyncTearDown(self):
        await self.engine.dispose()

    async def add_profile(self, role: str, first_name: str = "Test", last_name: str = "User") -> ProfileRead:
        suffix = uuid.uuid4().hex[:8]
        async with self.backend.session() as db:
            profile = Profile(
                id=f"prf-{suffix}",
                user_id=f"auth-{suffix}",
                email=f"{first_name.lower()}.{suffix}@example.com",
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
            db.add(profile)
            await db.flush()
            return ProfileRead.model_validate(profile)

    def context_for(self, profile: ProfileRead) -> SessionContext:
        return SessionContext(user_id=profile.user_id, profile=profile)

    def applications_for(self, profile: ProfileRead) -> ApplicationStore:
        return ApplicationStore(self.backend, self.context_for(profile))

    async def submit(self, applicant: ProfileRead, title: str = "T", description: str = "D"):
        result = await self.applications_for(applicant).create(title, description)
        self.assertTrue(result.ok, result.error)
        return result.data
