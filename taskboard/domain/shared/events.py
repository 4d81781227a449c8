"""Base domain event infrastructure.

Domain events are immutable records of a confirmed change to a project.
The sync layer publishes them to subscribers once the remote store has
accepted a mutation, or when a mutation had to be rolled back.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Each event has a unique ID, a timestamp and the id of the project it
    concerns.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    project_id: str

    model_config = {"frozen": True}
