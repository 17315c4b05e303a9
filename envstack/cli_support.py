"""Shared utilities for envstack CLI modules."""
from __future__ import annotations

import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from envstack.core.errors import EnvstackError


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("ENVSTACK_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from envstack.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: Optional[int] = None,
) -> None:
    """Report an error and exit.

    EnvstackError subclasses choose their own exit code (a failed command
    exits with that command's code); anything else exits with 1.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Override the exit code
    """
    print_error(console, str(e), prefix="[ERROR]")
    if verbose:
        console.print_exception()
    if exit_code is None:
        exit_code = e.exit_code if isinstance(e, EnvstackError) else 1
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting.

    Args:
        console: Rich console for output
        message: Success message
        prefix: Prefix symbol (default: ✓)
    """
    console.print(f"[green]{escape(prefix)}[/green] {escape(message)}", highlight=False)


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting.

    Args:
        console: Rich console for output
        message: Error message
        prefix: Prefix symbol (default: ✗)
    """
    console.print(f"[red]{escape(prefix)}[/red] {escape(message)}", highlight=False)


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting.

    Args:
        console: Rich console for output
        message: Warning message
        prefix: Prefix symbol (default: ⚠)
    """
    console.print(f"[yellow]{escape(prefix)}[/yellow] {escape(message)}", highlight=False)


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting.

    Args:
        console: Rich console for output
        message: Info message
        prefix: Prefix symbol (default: ℹ)
    """
    console.print(f"[cyan]{escape(prefix)}[/cyan] {escape(message)}", highlight=False)
