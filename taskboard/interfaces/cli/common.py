"""Shared utilities for taskboard CLI commands.

- Remote/sync construction from config and options
- Result handling (print the error, exit 1)
- Formatted output helpers (error, success, info)
- Project formatting for display
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Annotated, Any, Optional, TypeVar

import typer

from taskboard.application import ProjectSync, format_status
from taskboard.domain.project import Project
from taskboard.domain.shared import Err, Result, TrackerError
from taskboard.global_config import get_global_config
from taskboard.infrastructure.remote import HttpProjectRemote

T = TypeVar("T")

# Reusable API option for CLI commands
# Usage: def my_command(api_url: str | None = api_option) -> None:
api_option: Annotated[Optional[str], typer.Option(
    "--api-url",
    help="Project API root (or set TASKBOARD_API_URL env var)",
    envvar="TASKBOARD_API_URL",
)] = None


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from the global config or --verbose."""
    level = "DEBUG" if verbose else get_global_config().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_remote(api_url: str | None = None) -> HttpProjectRemote:
    """Create the HTTP remote, resolving the URL from option or config."""
    config = get_global_config()
    return HttpProjectRemote(base_url=api_url or config.api_url, timeout=config.timeout)


@asynccontextmanager
async def open_sync(api_url: str | None = None) -> AsyncIterator[ProjectSync]:
    """Yield a ProjectSync bound to the remote, closing it afterwards."""
    remote = build_remote(api_url)
    try:
        yield ProjectSync(remote)
    finally:
        await remote.aclose()


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine from a synchronous Typer command."""
    return asyncio.run(coro)


def unwrap(result: Result[T, TrackerError]) -> T:
    """Return the Ok value, or print the error and exit with code 1."""
    if isinstance(result, Err):
        print_error(result.error.message)
        raise typer.Exit(1)
    return result.value


def print_error(msg: str) -> None:
    """Print a formatted error message."""
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message."""
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    """Print a formatted info message."""
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_separator(char: str = "=", width: int = 60) -> None:
    """Print a separator line."""
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def progress_bar(percent: int, width: int = 20) -> str:
    """Render a percentage as a fixed-width text bar, e.g. [#####-----]."""
    filled = percent * width // 100
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def format_project_line(project: Project) -> str:
    """One-line summary of a project for listings."""
    return (
        f"{project.id:>6}  {project.name:<30} {format_status(project.status):<12} "
        f"{progress_bar(project.progress, 10)} {project.progress:>3}%  "
        f"{project.completed_count}/{len(project.tasks)} tasks"
    )


def print_project(project: Project) -> None:
    """Print a project with its tasks."""
    print_header(f"{project.name}  (id: {project.id})")
    typer.echo(
        f"Status: {format_status(project.status)}   "
        f"Progress: {progress_bar(project.progress)} {project.progress}%   "
        f"{project.completed_count}/{len(project.tasks)} tasks"
    )
    typer.echo(f"Created: {project.created_at:%Y-%m-%d}   Updated: {project.updated_at:%Y-%m-%d}")
    if project.description:
        typer.echo(f"\n{project.description}")
    if project.github_url:
        typer.echo(f"GitHub: {project.github_url}")

    typer.echo("\nTasks:")
    if not project.tasks:
        typer.echo("  No tasks yet.")
    for task in project.tasks:
        mark = "[x]" if task.completed else "[ ]"
        typer.echo(f"  {mark} {task.title}  ({task.id})")
        if task.description:
            typer.echo(f"      {task.description}")
    print_separator()


__all__ = [
    "api_option",
    "configure_logging",
    "build_remote",
    "open_sync",
    "run",
    "unwrap",
    "print_error",
    "print_success",
    "print_info",
    "print_separator",
    "print_header",
    "progress_bar",
    "format_project_line",
    "print_project",
]
