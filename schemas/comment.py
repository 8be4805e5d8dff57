from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.profile import PersonSummary


class CommentCreate(BaseModel):
    comment: str


class CommentRead(BaseModel):
    id: str
    application_id: str
    reviewer_id: str
    comment: str
    created_at: datetime
    reviewer: Optional[PersonSummary] = None

    model_config = {"from_attributes": True}
