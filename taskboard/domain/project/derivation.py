"""Derivation of a project's aggregate fields from its tasks.

``status`` and ``progress`` are never stored truths: they are computed
from the task list every time. Both functions are pure, idempotent and
independent of task order.
"""

from collections.abc import Iterable

from taskboard.domain.project.status import ProjectStatus
from taskboard.domain.task.models import Task


def _counts(tasks: Iterable[Task]) -> tuple[int, int]:
    total = 0
    done = 0
    for task in tasks:
        total += 1
        if task.completed:
            done += 1
    return done, total


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest int, halves up.

    Integer arithmetic only, so 12.5 always becomes 13 (unlike ``round``,
    which rounds halves to even).
    """
    return (2 * numerator + denominator) // (2 * denominator)


def compute_progress(tasks: Iterable[Task]) -> int:
    """Percentage of completed tasks, 0-100.

    Returns 0 for an empty task list.
    """
    done, total = _counts(tasks)
    if total == 0:
        return 0
    return round_half_up(100 * done, total)


def compute_status(tasks: Iterable[Task]) -> ProjectStatus:
    """Project status implied by the task list.

    - not-started: no tasks, or none completed
    - completed: every task completed
    - in-progress: anything in between
    """
    done, total = _counts(tasks)
    if total == 0 or done == 0:
        return ProjectStatus.NOT_STARTED
    if done == total:
        return ProjectStatus.COMPLETED
    return ProjectStatus.IN_PROGRESS


def derive(tasks: Iterable[Task]) -> tuple[ProjectStatus, int]:
    """Compute ``(status, progress)`` in one pass over the tasks."""
    tasks = list(tasks)
    return compute_status(tasks), compute_progress(tasks)
