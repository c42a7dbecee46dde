"""CLI package for toyclaw.

The CLI is a thin Typer wrapper around the commands layer.
"""

from toyclaw.cli.app import app, console

__all__ = ["app", "console"]
