"""Project domain package.

Contains the project aggregate: the frozen Project model, the pure
derivation of status and progress from tasks, and project events.
"""

from taskboard.domain.project.derivation import (
    compute_progress,
    compute_status,
    derive,
    round_half_up,
)
from taskboard.domain.project.events import (
    MutationRolledBack,
    ProjectCreated,
    ProjectDeleted,
    ProjectUpdated,
)
from taskboard.domain.project.models import (
    DashboardStats,
    NewProject,
    Project,
    ProjectChanges,
)
from taskboard.domain.project.status import ProjectStatus

__all__ = [
    # Models
    "Project",
    "ProjectStatus",
    "NewProject",
    "ProjectChanges",
    "DashboardStats",
    # Derivation
    "compute_progress",
    "compute_status",
    "derive",
    "round_half_up",
    # Events
    "ProjectCreated",
    "ProjectUpdated",
    "ProjectDeleted",
    "MutationRolledBack",
]
