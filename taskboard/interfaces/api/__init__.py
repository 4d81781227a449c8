"""API interface for taskboard.

Exports the reference REST app factory, its router and the in-memory
collection behind it.
"""

from taskboard.interfaces.api.routes import ProjectCollection, create_app, router

__all__ = ["router", "create_app", "ProjectCollection"]
