"""Project application service.

Orchestrates project-level operations by combining domain functions.
All functions are pure - no I/O, no side effects.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Literal

from taskboard.domain.project import (
    DashboardStats,
    NewProject,
    Project,
    ProjectChanges,
    ProjectCreated,
    ProjectStatus,
    ProjectUpdated,
    round_half_up,
)
from taskboard.domain.shared import Err, Ok, Result, TrackerError, ValidationError
from taskboard.domain.task import utcnow

RECENT_LIMIT = 5

StatusFilter = ProjectStatus | Literal["all"]


def _validate_name(name: str | None) -> ValidationError | None:
    if name is None or not name.strip():
        return ValidationError("name", "Project name cannot be empty")
    return None


def build_project(
    fields: NewProject,
    project_id: str,
    now: datetime | None = None,
) -> Result[tuple[Project, ProjectCreated], TrackerError]:
    """Create a project from user-supplied fields.

    Seed tasks are kept in the order given. ``status`` and ``progress``
    follow from them.

    Args:
        fields: Name, description, GitHub URL and optional seed tasks.
        project_id: Id to give the project (a temporary id before the
            remote store confirms it).
        now: Creation timestamp.

    Returns:
        Ok((Project, ProjectCreated)) on success, or
        Err(ValidationError) if the name is blank or seed task titles
        are blank or repeat an id.
    """
    error = _validate_name(fields.name)
    if error is not None:
        return Err(error)

    seen: set[str] = set()
    for task in fields.tasks:
        if not task.title.strip():
            return Err(ValidationError("tasks", "Task title cannot be empty"))
        if task.id in seen:
            return Err(ValidationError("tasks", f"Duplicate task id: {task.id}"))
        seen.add(task.id)

    now = now or utcnow()
    project = Project(
        id=project_id,
        name=fields.name.strip(),
        description=fields.description,
        github_url=fields.github_url,
        tasks=tuple(fields.tasks),
        created_at=now,
        updated_at=now,
    )
    event = ProjectCreated(project_id=project_id, name=project.name)
    return Ok((project, event))


def edit_project(
    project: Project,
    changes: ProjectChanges,
    now: datetime | None = None,
) -> Result[tuple[Project, ProjectUpdated], TrackerError]:
    """Apply a partial edit of name, description or GitHub URL.

    Tasks are untouched, so ``status`` and ``progress`` stay as they are.

    Returns:
        Ok((updated_project, ProjectUpdated)) on success, or
        Err(ValidationError) if the name is being set to a blank value.
    """
    update = changes.as_update()
    if "name" in update:
        error = _validate_name(update["name"])
        if error is not None:
            return Err(error)
        update["name"] = update["name"].strip()

    update["updated_at"] = now or utcnow()
    updated = project.model_copy(update=update)
    event = ProjectUpdated(
        project_id=project.id,
        changed_fields=sorted(k for k in update if k != "updated_at"),
    )
    return Ok((updated, event))


def format_status(status: ProjectStatus | str) -> str:
    """Format a status for display, e.g. 'not-started' -> 'Not Started'."""
    return ProjectStatus(status).label


def filter_by_status(projects: Iterable[Project], status: StatusFilter = "all") -> list[Project]:
    """Keep the projects with the given status ('all' keeps everything)."""
    if status == "all":
        return list(projects)
    wanted = ProjectStatus(status)
    return [project for project in projects if project.status == wanted]


def get_dashboard_stats(projects: Iterable[Project]) -> DashboardStats:
    """Aggregate project and task counts across all projects.

    ``task_progress`` is the share of completed tasks over every project,
    rounded half-up like project progress.
    """
    stats = {"total": 0, "total_tasks": 0, "completed_tasks": 0}
    by_status = {status: 0 for status in ProjectStatus}

    for project in projects:
        stats["total"] += 1
        by_status[project.status] += 1
        stats["total_tasks"] += len(project.tasks)
        stats["completed_tasks"] += project.completed_count

    task_progress = 0
    if stats["total_tasks"] > 0:
        task_progress = round_half_up(100 * stats["completed_tasks"], stats["total_tasks"])

    return DashboardStats(
        **stats,
        completed=by_status[ProjectStatus.COMPLETED],
        in_progress=by_status[ProjectStatus.IN_PROGRESS],
        not_started=by_status[ProjectStatus.NOT_STARTED],
        task_progress=task_progress,
    )


def recent_projects(projects: Iterable[Project], limit: int = RECENT_LIMIT) -> list[Project]:
    """Most recently updated projects first."""
    ordered = sorted(projects, key=lambda project: project.updated_at, reverse=True)
    return ordered[:limit]
