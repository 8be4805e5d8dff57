from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from models import Profile
from schemas.profile import ProfileRead
from services.backend import Backend


@dataclass(frozen=True)
class SessionContext:
    """The signed-in caller as seen by the stores; `profile` is None until one exists."""
    user_id: Optional[str] = None
    profile: Optional[ProfileRead] = None

    @property
    def role(self) -> Optional[str]:
        return self.profile.role if self.profile else None

    def has_role(self, *roles: str) -> bool:
        return self.profile is not None and self.profile.role in roles


async def load_session_context(backend: Backend, user_id: Optional[str]) -> SessionContext:
    if not user_id:
        return SessionContext()
    async with backend.session() as db:
        result = await db.execute(select(Profile).where(Profile.user_id == user_id))
        profile = result.scalar_one_or_none()
        return SessionContext(
            user_id=user_id,
            profile=ProfileRead.model_validate(profile) if profile else None,
        )
