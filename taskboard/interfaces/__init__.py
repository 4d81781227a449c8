"""Interfaces layer for taskboard.

Adapters for external interactions:
- CLI: command-line interface using Typer
- API: reference REST collection using FastAPI

The interfaces layer accepts user input, calls the application layer and
formats output. It never touches the store directly.
"""
