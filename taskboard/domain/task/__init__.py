"""Task domain package.

Key Types:
    Task - unit of work with an immutable id and a completion flag

Domain Events:
    TaskAdded - task appended to a project
    TaskToggled - completion flag flipped
    TaskRemoved - task removed from a project
"""

from .events import TaskAdded, TaskRemoved, TaskToggled
from .models import Task, new_task_id, utcnow

__all__ = [
    # Models
    "Task",
    "new_task_id",
    "utcnow",
    # Events
    "TaskAdded",
    "TaskToggled",
    "TaskRemoved",
]
