"""Domain value objects for taskboard."""

import secrets
from dataclasses import dataclass

TEMPORARY_PREFIX = "tmp-"


@dataclass(frozen=True)
class TemporaryId:
    """Placeholder id for a project the remote store has not confirmed yet.

    Combines a per-session sequence number with a random token, under a
    prefix the remote store never issues. Unique for the lifetime of the
    store that generated it.

    Example:
        TemporaryId.generate(3)  # TemporaryId(value="tmp-3-9f2c1a7e")
    """

    value: str

    @classmethod
    def generate(cls, sequence: int) -> "TemporaryId":
        return cls(value=f"{TEMPORARY_PREFIX}{sequence}-{secrets.token_hex(4)}")

    @staticmethod
    def is_temporary(project_id: str) -> bool:
        """Check whether an id was issued locally."""
        return project_id.startswith(TEMPORARY_PREFIX)

    def __str__(self) -> str:
        return self.value
