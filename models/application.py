from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.profile import _now


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(64), primary_key=True, index=True)
    applicant_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default="pending", index=True)
    assigned_reviewer_id = Column(String(64), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    submitted_at = Column(DateTime(timezone=True), default=_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)

    applicant = relationship("Profile", foreign_keys=[applicant_id])
    assigned_reviewer = relationship("Profile", foreign_keys=[assigned_reviewer_id])
    comments = relationship("ApplicationComment", back_populates="application", cascade="all, delete-orphan", passive_deletes=True)
