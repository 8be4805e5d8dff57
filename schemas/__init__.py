from schemas.application import (
    STATUSES,
    ApplicationCreate,
    ApplicationRead,
    ReviewerAssignment,
    Status,
    StatusUpdate,
)
from schemas.comment import CommentCreate, CommentRead
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
from schemas.profile import ROLES, PersonSummary, ProfileRead, Role, RoleUpdate

__all__ = [
    "STATUSES",
    "ROLES",
    "ApplicationCreate",
    "ApplicationRead",
    "ReviewerAssignment",
    "Status",
    "StatusUpdate",
    "CommentCreate",
    "CommentRead",
    "AdminDashboard",
    "AdminStats",
    "ApplicantDashboard",
    "ApplicantStats",
    "Dashboard",
    "ReviewerDashboard",
    "ReviewerStats",
    "UnassignedDashboard",
    "PersonSummary",
    "ProfileRead",
    "Role",
    "RoleUpdate",
]
