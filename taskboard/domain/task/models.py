"""Task domain model.

A task is the atomic unit of work inside a project. Its identity and
creation time never change; ``completed`` only changes through
:meth:`Task.toggled`.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_task_id() -> str:
    """Generate a collision-free task id."""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


class Task(BaseModel):
    """A unit of work belonging to a project."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_task_id)
    title: str
    description: str | None = None
    completed: bool = False
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # Older records carry numeric ids
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def toggled(self) -> "Task":
        """Return a copy with the completion flag flipped."""
        return self.model_copy(update={"completed": not self.completed})
