"""Project domain models.

Pure data structures with no I/O. A :class:`Project` is frozen: every
change produces a new instance, so a snapshot taken before a mutation can
never be altered by it.

``status`` and ``progress`` are computed fields backed by the derivation
functions. They are serialized for the remote store, but any values the
remote sends back for them are ignored and re-derived from ``tasks``.
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from taskboard.domain.project.derivation import compute_progress, compute_status
from taskboard.domain.project.status import ProjectStatus
from taskboard.domain.task.models import Task, utcnow


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Project(BaseModel):
    """A tracked project and its ordered task list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    github_url: str | None = Field(default=None, alias="githubUrl")
    tasks: tuple[Task, ...] = ()
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("description", "github_url", mode="before")
    @classmethod
    def _normalize_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("tasks", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return () if value is None else value

    @computed_field
    @property
    def status(self) -> ProjectStatus:
        return compute_status(self.tasks)

    @computed_field
    @property
    def progress(self) -> int:
        return compute_progress(self.tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    def find_task(self, task_id: str) -> Task | None:
        """Get a task by its id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def with_tasks(self, tasks: Iterable[Task], now: datetime | None = None) -> "Project":
        """Return a copy with a new task list and a refreshed ``updated_at``.

        This is the only way a project's tasks change, so ``status`` and
        ``progress`` always follow the new list.
        """
        return self.model_copy(
            update={"tasks": tuple(tasks), "updated_at": now or utcnow()}
        )

    def to_payload(self, *, include_id: bool = True) -> dict:
        """Serialize to the remote store's camelCase JSON shape."""
        exclude = None if include_id else {"id"}
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class NewProject(BaseModel):
    """Fields supplied by a user when creating a project."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str | None = None
    github_url: str | None = Field(default=None, alias="githubUrl")
    tasks: list[Task] = Field(default_factory=list)

    @field_validator("description", "github_url", mode="before")
    @classmethod
    def _normalize_optional(cls, value: object) -> object:
        return _blank_to_none(value)


class ProjectChanges(BaseModel):
    """A partial edit of a project's own fields.

    Only fields that were explicitly set are applied, so passing
    ``github_url=None`` clears the URL while omitting it leaves it alone.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    description: str | None = None
    github_url: str | None = Field(default=None, alias="githubUrl")

    @field_validator("description", "github_url", mode="before")
    @classmethod
    def _normalize_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    def as_update(self) -> dict[str, object]:
        """Explicitly set fields, keyed by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class DashboardStats(BaseModel):
    """Aggregate counts across all projects for dashboard display."""

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    task_progress: int = 0
