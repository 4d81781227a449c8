"""CLI interface for taskboard using Typer.

Usage:
    taskboard project list              # List projects
    taskboard project create -n NAME    # Create a project
    taskboard task toggle ID TASK_ID    # Flip a task's completion
    taskboard dashboard                 # Totals and recent projects
    taskboard serve                     # Run the reference API locally

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (project, task)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from taskboard import __version__
from taskboard.application import get_dashboard_stats, recent_projects
from taskboard.interfaces.cli import common
from taskboard.interfaces.cli.commands import project, task
from taskboard.interfaces.cli.common import (
    api_option,
    configure_logging,
    format_project_line,
    print_header,
    print_info,
    progress_bar,
    run,
    unwrap,
)

# Create the main Typer application
app = typer.Typer(
    name="taskboard",
    help="Track projects whose progress follows from their tasks",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"taskboard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """taskboard - projects, tasks and derived progress."""
    configure_logging(verbose)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(project.app, name="project")
app.add_typer(task.app, name="task")


# =============================================================================
# Top-Level Commands
# =============================================================================


@app.command("dashboard")
def dashboard(api_url: Optional[str] = api_option) -> None:
    """Show totals across all projects and the most recent ones."""

    async def _load():
        async with common.open_sync(api_url) as sync:
            return list(unwrap(await sync.refresh()))

    projects = run(_load())
    stats = get_dashboard_stats(projects)

    print_header("DASHBOARD")
    typer.echo(f"Projects:    {stats.total}")
    typer.echo(f"  Completed:   {stats.completed}")
    typer.echo(f"  In Progress: {stats.in_progress}")
    typer.echo(f"  Not Started: {stats.not_started}")
    typer.echo(
        f"Tasks:       {stats.completed_tasks}/{stats.total_tasks} "
        f"{progress_bar(stats.task_progress)} {stats.task_progress}%"
    )

    typer.echo("\nRecent projects:")
    recent = recent_projects(projects)
    if not recent:
        print_info("  No projects yet. Create one with: taskboard project create -n NAME")
    for item in recent:
        typer.echo(format_project_line(item))


@app.command("list")
def list_projects(api_url: Optional[str] = api_option) -> None:
    """List projects (shortcut for 'project list')."""
    project.list_projects(status=project.StatusChoice.ALL, api_url=api_url)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(3000, "--port", help="Port to listen on"),
) -> None:
    """Run the reference project API (in-memory) with uvicorn."""
    import uvicorn

    from taskboard.interfaces.api import create_app

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


__all__ = ["app"]
