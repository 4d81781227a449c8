"""Error values for tracker operations.

These are carried inside ``Err`` rather than raised. Every error exposes a
human-readable ``message`` so interfaces can show it without knowing the
concrete type.

    NotFound        - a project or task id is absent
    ValidationError - a required field is empty; nothing was changed
    RemoteFailure   - the remote store rejected or never answered a call
    ConflictStale   - a response arrived for a superseded mutation
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackerError:
    """Base class for all tracker errors."""

    @property
    def message(self) -> str:
        return self.__class__.__name__

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class NotFound(TrackerError):
    """A project or task id is not present in the store or remote."""

    kind: str
    id: str

    @property
    def message(self) -> str:
        return f"{self.kind.capitalize()} not found: {self.id}"


@dataclass(frozen=True)
class ValidationError(TrackerError):
    """Input rejected before any state change."""

    field: str
    reason: str

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class RemoteFailure(TrackerError):
    """The remote collaborator call failed.

    Attributes:
        operation: Remote operation name (create, update, delete, ...).
        reason: What went wrong (transport error, HTTP status, bad payload).
        status_code: HTTP status when a response was received.
    """

    operation: str
    reason: str
    status_code: int | None = None

    @property
    def message(self) -> str:
        return f"Remote {self.operation} failed: {self.reason}"


@dataclass(frozen=True)
class ConflictStale(TrackerError):
    """A remote response belongs to a mutation that has been superseded."""

    project_id: str
    generation: int

    @property
    def message(self) -> str:
        return (
            f"Discarded stale response for project {self.project_id} "
            f"(generation {self.generation})"
        )
