"""taskboard - project tracking with derived progress and optimistic sync."""

__version__ = "0.1.0"
