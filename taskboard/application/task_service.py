"""Task application service.

Pure transformations of a project's task list. Each function takes the
current project and returns the next one together with the event that
describes the change. Nothing here touches the store or the network.
"""

from datetime import datetime

from taskboard.domain.project import Project
from taskboard.domain.shared import Err, NotFound, Ok, Result, TrackerError, ValidationError
from taskboard.domain.task import (
    Task,
    TaskAdded,
    TaskRemoved,
    TaskToggled,
    new_task_id,
    utcnow,
)


def add_task(
    project: Project,
    title: str,
    description: str | None = None,
    now: datetime | None = None,
) -> Result[tuple[Project, TaskAdded], TrackerError]:
    """Append a new, incomplete task to the end of the project's list.

    Args:
        project: The project to add to.
        title: Task title; must not be blank.
        description: Optional task description.
        now: Timestamp for the task and the project's ``updated_at``.

    Returns:
        Ok((updated_project, TaskAdded)) on success, or
        Err(ValidationError) if the title is blank.
    """
    if not title or not title.strip():
        return Err(ValidationError("title", "Task title cannot be empty"))

    now = now or utcnow()
    task = Task(
        title=title.strip(),
        description=description.strip() if description else None,
        created_at=now,
    )
    # uuid4 ids make a clash practically impossible; regenerate if one happens
    while project.find_task(task.id) is not None:
        task = task.model_copy(update={"id": new_task_id()})

    updated = project.with_tasks([*project.tasks, task], now)
    event = TaskAdded(project_id=project.id, task_id=task.id, title=task.title)
    return Ok((updated, event))


def toggle_task(
    project: Project,
    task_id: str,
    now: datetime | None = None,
) -> Result[tuple[Project, TaskToggled], TrackerError]:
    """Flip the completion flag of one task.

    Returns:
        Ok((updated_project, TaskToggled)) on success, or
        Err(NotFound) if the project has no such task.
    """
    target = project.find_task(task_id)
    if target is None:
        return Err(NotFound("task", task_id))

    toggled = target.toggled()
    tasks = [toggled if task.id == task_id else task for task in project.tasks]
    event = TaskToggled(
        project_id=project.id,
        task_id=task_id,
        completed=toggled.completed,
    )
    return Ok((project.with_tasks(tasks, now), event))


def remove_task(
    project: Project,
    task_id: str,
    now: datetime | None = None,
) -> Result[tuple[Project, TaskRemoved], TrackerError]:
    """Remove one task, keeping the order of the rest."""
    if project.find_task(task_id) is None:
        return Err(NotFound("task", task_id))

    tasks = [task for task in project.tasks if task.id != task_id]
    event = TaskRemoved(project_id=project.id, task_id=task_id)
    return Ok((project.with_tasks(tasks, now), event))
