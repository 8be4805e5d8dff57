from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from schemas.application import ApplicationRead
from schemas.profile import ProfileRead


class AdminStats(BaseModel):
    total_applications: int
    pending_applications: int
    under_review: int
    approved: int
    total_users: int


class ReviewerStats(BaseModel):
    total_assigned: int
    pending: int
    under_review: int
    # approved + rejected
    completed: int


class ApplicantStats(BaseModel):
    total: int
    pending: int
    under_review: int
    approved: int
    rejected: int


class AdminDashboard(BaseModel):
    kind: Literal["admin"] = "admin"
    stats: AdminStats
    applications: list[ApplicationRead]
    profiles: list[ProfileRead]
    reviewers: list[ProfileRead]


class ReviewerDashboard(BaseModel):
    kind: Literal["reviewer"] = "reviewer"
    stats: ReviewerStats
    applications: list[ApplicationRead]


class ApplicantDashboard(BaseModel):
    kind: Literal["applicant"] = "applicant"
    stats: ApplicantStats
    applications: list[ApplicationRead]


class UnassignedDashboard(BaseModel):
    kind: Literal["unassigned"] = "unassigned"
    message: str = "Your role is being configured. Please contact an administrator."


Dashboard = Annotated[
    Union[AdminDashboard, ReviewerDashboard, ApplicantDashboard, UnassignedDashboard],
    Field(discriminator="kind"),
]
