from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True, index=True)
    # Identity issued by the auth service
    user_id = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(256), nullable=False)
    first_name = Column(String(128), nullable=False, default="")
    last_name = Column(String(128), nullable=False, default="")
    role = Column(String(32), nullable=False, default="applicant", index=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)
