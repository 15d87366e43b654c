"""Shared helpers for the confsync CLI: console output, logging, exit codes."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_ERROR",
    "EXIT_CONFIG_ERROR",
    "console",
    "_error",
    "_info",
    "_success",
    "_warning",
    "_setup_logging",
    "_resolve_path",
]

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

console = Console()


def _error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]Error:[/red] {escape(message)}")


def _warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {escape(message)}")


def _info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure root logging for CLI runs.

    Verbose takes precedence over quiet.

    Args:
        verbose: Log at DEBUG level.
        quiet: Log at WARNING level.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _resolve_path(path: str, label: str, must_exist: bool = False) -> Path:
    """Expand and resolve a CLI path argument.

    Raises:
        typer.Exit: With EXIT_ERROR if must_exist and the path is missing
            or not a file.

    """
    resolved = Path(path).expanduser().resolve()
    if must_exist:
        if not resolved.exists():
            _error(f"{label} not found: {resolved}")
            raise typer.Exit(code=EXIT_ERROR)
        if not resolved.is_file():
            _error(f"{label} is not a file: {resolved}")
            raise typer.Exit(code=EXIT_ERROR)
    return resolved
