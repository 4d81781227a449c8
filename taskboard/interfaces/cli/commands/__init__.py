"""CLI command groups for taskboard.

Command groups:
- project: list, show, create, edit, delete
- task: add, toggle, remove

Each module provides a Typer app registered with the main app using
app.add_typer().
"""

from taskboard.interfaces.cli.commands import project, task

__all__ = ["project", "task"]
