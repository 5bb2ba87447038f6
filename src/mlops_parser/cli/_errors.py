"""CLI error handling."""

from __future__ import annotations

from typing import NoReturn

import typer


def handle_error(msg: str) -> NoReturn:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)
