"""Task management CLI commands.

Adding, toggling and removing tasks within a project. Every command
prints the project's resulting progress.
"""

from typing import Optional

import typer

from taskboard.application import ProjectSync, format_status
from taskboard.domain.project import Project
from taskboard.domain.shared import Result, TrackerError
from taskboard.interfaces.cli import common
from taskboard.interfaces.cli.common import api_option, print_success, run, unwrap

app = typer.Typer(help="Task management commands")


def _mutate(project_id: str, api_url: str | None, mutation) -> Project:
    """Load the project, then apply ``mutation(sync)`` to it."""

    async def _run():
        async with common.open_sync(api_url) as sync:
            unwrap(await sync.get_project(project_id))
            result: Result[Project, TrackerError] = await mutation(sync)
            return unwrap(result)

    return run(_run())


def _print_progress(project: Project) -> None:
    typer.echo(
        f"{project.name}: {format_status(project.status)}, {project.progress}% "
        f"({project.completed_count}/{len(project.tasks)} tasks)"
    )


@app.command("add")
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    api_url: Optional[str] = api_option,
) -> None:
    """Add a task to a project."""

    def mutation(sync: ProjectSync):
        return sync.add_task(project_id, title, description)

    project = _mutate(project_id, api_url, mutation)
    print_success(f"Added task: {project.tasks[-1].id}")
    _print_progress(project)


@app.command("toggle")
def toggle(
    project_id: str = typer.Argument(..., help="Project ID"),
    task_id: str = typer.Argument(..., help="Task ID"),
    api_url: Optional[str] = api_option,
) -> None:
    """Mark a task done, or not done if it already is."""

    def mutation(sync: ProjectSync):
        return sync.toggle_task(project_id, task_id)

    project = _mutate(project_id, api_url, mutation)
    task = project.find_task(task_id)
    state = "done" if task is not None and task.completed else "not done"
    print_success(f"Task {task_id} marked {state}")
    _print_progress(project)


@app.command("remove")
def remove(
    project_id: str = typer.Argument(..., help="Project ID"),
    task_id: str = typer.Argument(..., help="Task ID"),
    api_url: Optional[str] = api_option,
) -> None:
    """Remove a task from a project."""

    def mutation(sync: ProjectSync):
        return sync.remove_task(project_id, task_id)

    project = _mutate(project_id, api_url, mutation)
    print_success(f"Removed task: {task_id}")
    _print_progress(project)
