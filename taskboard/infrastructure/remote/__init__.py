"""Remote project store access."""

from taskboard.infrastructure.remote.client import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    HttpProjectRemote,
    ProjectRemote,
)

__all__ = [
    "ProjectRemote",
    "HttpProjectRemote",
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT",
]
