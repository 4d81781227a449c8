"""Storage infrastructure for taskboard.

The client-side project store and its restartable listings.
"""

from taskboard.infrastructure.storage.store import ProjectListing, ProjectStore

__all__ = [
    "ProjectStore",
    "ProjectListing",
]
