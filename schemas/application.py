from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from schemas.profile import PersonSummary

Status = Literal["pending", "under_review", "approved", "rejected"]

STATUSES: tuple[str, ...] = ("pending", "under_review", "approved", "rejected")


class ApplicationCreate(BaseModel):
    title: str
    description: str


class StatusUpdate(BaseModel):
    status: Status


class ReviewerAssignment(BaseModel):
    reviewer_id: str = Field(..., alias="reviewerId")

    model_config = {"populate_by_name": True}


class ApplicationRead(BaseModel):
    id: str
    applicant_id: str
    title: str
    description: str
    status: Status
    assigned_reviewer_id: Optional[str] = None
    submitted_at: datetime
    updated_at: datetime
    applicant: Optional[PersonSummary] = None
    assigned_reviewer: Optional[PersonSummary] = None

    model_config = {"from_attributes": True}
