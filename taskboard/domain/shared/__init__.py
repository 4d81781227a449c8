"""Shared domain building blocks.

- Result monad for explicit error handling
- Error values carried inside ``Err``
- Base domain event

Example usage:
    >>> from taskboard.domain.shared import Err, NotFound, Ok, Result
    >>>
    >>> def lookup(project_id: str) -> Result[str, NotFound]:
    ...     if project_id != "1":
    ...         return Err(NotFound("project", project_id))
    ...     return Ok("Website relaunch")
"""

from taskboard.domain.shared.errors import (
    ConflictStale,
    NotFound,
    RemoteFailure,
    TrackerError,
    ValidationError,
)
from taskboard.domain.shared.events import DomainEvent
from taskboard.domain.shared.result import (
    Err,
    Ok,
    Result,
    map_result,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "map_result",
    # Errors
    "TrackerError",
    "NotFound",
    "ValidationError",
    "RemoteFailure",
    "ConflictStale",
    # Domain events
    "DomainEvent",
]
