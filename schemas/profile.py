from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

Role = Literal["admin", "reviewer", "applicant"]

ROLES: tuple[str, ...] = ("admin", "reviewer", "applicant")


class PersonSummary(BaseModel):
    """Name and email embedded into application and comment views."""
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class ProfileRead(BaseModel):
    id: str
    user_id: str
    email: str
    first_name: str
    last_name: str
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoleUpdate(BaseModel):
    role: Role
