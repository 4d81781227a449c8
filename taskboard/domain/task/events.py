"""Task domain events.

Immutable records of confirmed changes to a project's task list.
"""

from taskboard.domain.shared.events import DomainEvent


class TaskAdded(DomainEvent):
    """A task was appended to a project."""

    task_id: str
    title: str


class TaskToggled(DomainEvent):
    """A task's completion flag was flipped."""

    task_id: str
    completed: bool


class TaskRemoved(DomainEvent):
    """A task was removed from a project."""

    task_id: str
