"""Infrastructure layer for taskboard.

I/O-facing adapters, each returning Result values:

    Storage:
        - ProjectStore: in-memory client-side project cache
        - ProjectListing: restartable listing of committed projects

    Remote:
        - ProjectRemote: protocol for the remote project collection
        - HttpProjectRemote: httpx implementation of ProjectRemote
"""

from taskboard.infrastructure.remote import HttpProjectRemote, ProjectRemote
from taskboard.infrastructure.storage import ProjectListing, ProjectStore

__all__ = [
    # Storage
    "ProjectStore",
    "ProjectListing",
    # Remote
    "ProjectRemote",
    "HttpProjectRemote",
]
