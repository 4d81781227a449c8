"""Project status enumeration."""

from enum import Enum


class ProjectStatus(str, Enum):
    """Derived status of a project."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Display label, e.g. 'in-progress' -> 'In Progress'."""
        return " ".join(word.capitalize() for word in self.value.split("-"))
