"""Application layer for taskboard.

Services:
    task_service - pure task list transformations (add, toggle, remove)
    project_service - pure project operations, filters and dashboard stats
    sync - ProjectSync, the optimistic mutation protocol over the store
        and the remote collection

Example usage:
    >>> from taskboard.application import ProjectSync
    >>> from taskboard.infrastructure import HttpProjectRemote
    >>>
    >>> sync = ProjectSync(HttpProjectRemote("http://localhost:3000"))
    >>> result = await sync.toggle_task("7", task_id)
    >>> if isinstance(result, Err):
    ...     print(result.error.message)
"""

from taskboard.application.project_service import (
    build_project,
    edit_project,
    filter_by_status,
    format_status,
    get_dashboard_stats,
    recent_projects,
)
from taskboard.application.task_service import add_task, remove_task, toggle_task
from taskboard.application.sync import ProjectSync

__all__ = [
    # Task service
    "add_task",
    "toggle_task",
    "remove_task",
    # Project service
    "build_project",
    "edit_project",
    "format_status",
    "filter_by_status",
    "get_dashboard_stats",
    "recent_projects",
    # Sync
    "ProjectSync",
]
