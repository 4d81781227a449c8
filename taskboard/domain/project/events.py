"""Project domain events.

Immutable records of confirmed project-level changes, plus the record of
a mutation the remote store refused.
"""

from taskboard.domain.shared.events import DomainEvent


class ProjectCreated(DomainEvent):
    """A project was created and confirmed by the remote store.

    ``temporary_id`` is the placeholder id the project carried locally
    before the remote store assigned ``project_id``.
    """

    name: str
    temporary_id: str | None = None


class ProjectUpdated(DomainEvent):
    """A project's own fields were edited."""

    changed_fields: list[str]


class ProjectDeleted(DomainEvent):
    """A project and all of its tasks were removed."""


class MutationRolledBack(DomainEvent):
    """A local change was undone because the remote call failed."""

    operation: str
    reason: str
