"""
Role dashboards: status summaries and action tables built from the stores.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable

from schemas.application import ApplicationRead
from schemas.dashboard import (
    AdminDashboard,
    AdminStats,
    ApplicantDashboard,
    ApplicantStats,
    Dashboard,
    ReviewerDashboard,
    ReviewerStats,
    UnassignedDashboard,
)
from services.application_store import ApplicationStore
from services.backend import Backend
from services.profile_store import ProfileStore
from services.results import MutationResult
from services.session_context import SessionContext


def _status_counts(applications: Iterable[ApplicationRead]) -> Counter:
    return Counter(a.status for a in applications)


def admin_dashboard(applications: ApplicationStore, profiles: ProfileStore) -> AdminDashboard:
    counts = _status_counts(applications.applications)
    return AdminDashboard(
        stats=AdminStats(
            total_applications=len(applications.applications),
            pending_applications=counts["pending"],
            under_review=counts["under_review"],
            approved=counts["approved"],
            total_users=len(profiles.profiles),
        ),
        applications=applications.applications,
        profiles=profiles.profiles,
        reviewers=profiles.get_reviewers(),
    )


def reviewer_dashboard(applications: ApplicationStore) -> ReviewerDashboard:
    counts = _status_counts(applications.applications)
    return ReviewerDashboard(
        stats=ReviewerStats(
            total_assigned=len(applications.applications),
            pending=counts["pending"],
            under_review=counts["under_review"],
            completed=counts["approved"] + counts["rejected"],
        ),
        applications=applications.applications,
    )


def applicant_dashboard(applications: ApplicationStore) -> ApplicantDashboard:
    counts = _status_counts(applications.applications)
    return ApplicantDashboard(
        stats=ApplicantStats(
            total=len(applications.applications),
            pending=counts["pending"],
            under_review=counts["under_review"],
            approved=counts["approved"],
            rejected=counts["rejected"],
        ),
        applications=applications.applications,
    )


async def build_dashboard(backend: Backend, context: SessionContext) -> MutationResult[Dashboard]:
    """Fetch what the caller's role needs and render the matching dashboard variant."""
    role = context.role
    if role is None:
        return MutationResult.success(UnassignedDashboard())

    applications = ApplicationStore(backend, context)
    await applications.refresh()
    if applications.error is not None:
        return MutationResult(error=applications.error)
    if role == "admin":
        profiles = ProfileStore(backend, context)
        await profiles.refresh()
        if profiles.error is not None:
            return MutationResult(error=profiles.error)
        return MutationResult.success(admin_dashboard(applications, profiles))
    if role == "reviewer":
        return MutationResult.success(reviewer_dashboard(applications))
    return MutationResult.success(applicant_dashboard(applications))
