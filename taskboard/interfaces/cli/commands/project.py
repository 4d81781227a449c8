"""Project management CLI commands.

Listing, inspecting, creating, editing and deleting projects.
"""

from enum import Enum
from typing import Optional

import typer

from taskboard.application import filter_by_status
from taskboard.domain.project import NewProject, ProjectChanges
from taskboard.domain.task import Task
from taskboard.interfaces.cli import common
from taskboard.interfaces.cli.common import (
    api_option,
    format_project_line,
    print_info,
    print_project,
    print_success,
    run,
    unwrap,
)

app = typer.Typer(help="Project management commands")


class StatusChoice(str, Enum):
    ALL = "all"
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# =============================================================================
# Commands
# =============================================================================


@app.command("list")
def list_projects(
    status: StatusChoice = typer.Option(
        StatusChoice.ALL, "--status", "-s", help="Only show projects with this status"
    ),
    api_url: Optional[str] = api_option,
) -> None:
    """List projects with their status and progress."""

    async def _list():
        async with common.open_sync(api_url) as sync:
            return unwrap(await sync.refresh())

    projects = filter_by_status(run(_list()), status.value)
    if not projects:
        print_info("No projects found.")
        return
    for project in projects:
        typer.echo(format_project_line(project))


@app.command("show")
def show(
    project_id: str = typer.Argument(..., help="Project ID"),
    api_url: Optional[str] = api_option,
) -> None:
    """Show a project and its tasks."""

    async def _show():
        async with common.open_sync(api_url) as sync:
            return unwrap(await sync.get_project(project_id))

    print_project(run(_show()))


@app.command("create")
def create(
    name: str = typer.Option(..., "--name", "-n", help="Project name"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    github_url: Optional[str] = typer.Option(None, "--github-url", "-g"),
    tasks: Optional[list[str]] = typer.Option(
        None, "--task", "-t", help="Seed task title (repeatable)"
    ),
    api_url: Optional[str] = api_option,
) -> None:
    """Create a project, optionally seeded with tasks.

    Example:
        taskboard project create -n "Website" -t "Design" -t "Build"
    """
    fields = NewProject(
        name=name,
        description=description,
        github_url=github_url,
        tasks=[Task(title=title.strip()) for title in tasks or []],
    )

    async def _create():
        async with common.open_sync(api_url) as sync:
            return unwrap(await sync.create_project(fields))

    project = run(_create())
    print_success(f"Created project: {project.id}")


@app.command("edit")
def edit(
    project_id: str = typer.Argument(..., help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    github_url: Optional[str] = typer.Option(None, "--github-url", "-g"),
    clear_github_url: bool = typer.Option(
        False, "--clear-github-url", help="Remove the GitHub URL"
    ),
    api_url: Optional[str] = api_option,
) -> None:
    """Edit a project's name, description or GitHub URL."""
    supplied = {"name": name, "description": description, "github_url": github_url}
    update = {key: value for key, value in supplied.items() if value is not None}
    if clear_github_url:
        update["github_url"] = None
    if not update:
        print_info("Nothing to change.")
        return

    async def _edit():
        async with common.open_sync(api_url) as sync:
            unwrap(await sync.get_project(project_id))
            return unwrap(await sync.update_project_fields(project_id, ProjectChanges(**update)))

    project = run(_edit())
    print_success(f"Updated project: {project.id}")


@app.command("delete")
def delete(
    project_id: str = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    api_url: Optional[str] = api_option,
) -> None:
    """Delete a project and all of its tasks."""
    if not yes:
        typer.confirm(f"Delete project {project_id}?", abort=True)

    async def _delete():
        async with common.open_sync(api_url) as sync:
            unwrap(await sync.get_project(project_id))
            unwrap(await sync.delete_project(project_id))

    run(_delete())
    print_success(f"Deleted project: {project_id}")
