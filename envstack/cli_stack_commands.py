"""Stack CLI commands - up, down, status, profiles."""
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from envstack.cli_support import handle_cli_error, is_mock, print_success, print_warning
from envstack.core.config import get_config
from envstack.core.errors import EnvstackError
from envstack.core.runner import CommandRunner
from envstack.services.stack.catalog import DEFAULT_PROFILE, builtin_profiles
from envstack.services.stack.launcher import ComposeLauncher

# Module-level console instance (will be set by register function)
console: Console = Console()


def _launcher(workdir: Optional[str], project: Optional[str]) -> ComposeLauncher:
    config = get_config()
    return ComposeLauncher(
        workdir or config.workdir,
        runner=CommandRunner(mock=is_mock()),
        project_name=project or config.project_name,
    )


def up(
    workdir: Optional[str] = typer.Option(None, "--workdir", "-w", help="Directory holding docker-compose.yml"),
    project: Optional[str] = typer.Option(None, "--project", help="Docker Compose project name"),
):
    """Start the generated stack in the background."""
    try:
        _launcher(workdir, project).up()
    except EnvstackError as e:
        handle_cli_error(e, console)
    print_success(console, "Containers started")


def down(
    workdir: Optional[str] = typer.Option(None, "--workdir", "-w", help="Directory holding docker-compose.yml"),
    project: Optional[str] = typer.Option(None, "--project", help="Docker Compose project name"),
):
    """Stop and remove the stack's containers (data directories are kept)."""
    try:
        _launcher(workdir, project).down()
    except EnvstackError as e:
        handle_cli_error(e, console)
    print_success(console, "Containers stopped")


def status(
    workdir: Optional[str] = typer.Option(None, "--workdir", "-w", help="Directory holding docker-compose.yml"),
    project: Optional[str] = typer.Option(None, "--project", help="Docker Compose project name"),
):
    """Show the containers Docker Compose reports for the stack."""
    try:
        services = _launcher(workdir, project).status()
    except (EnvstackError, ValueError) as e:
        handle_cli_error(e, console)

    if not services:
        print_warning(console, "No containers running")
        return

    table = Table(title="Stack containers", show_header=True)
    table.add_column("Service", style="cyan")
    table.add_column("Container")
    table.add_column("State")
    table.add_column("Status", style="dim")
    for svc in services:
        state = svc.get('State', 'unknown')
        color = "green" if state == 'running' else "red"
        table.add_row(
            escape(svc.get('Service', 'unknown')),
            escape(svc.get('Name', '')),
            f"[{color}]{escape(state)}[/{color}]",
            escape(svc.get('Status', '')),
        )
    console.print(table)


def profiles():
    """List the service sets that can be deployed."""
    table = Table(title="Profiles", show_header=True)
    table.add_column("Profile", style="cyan")
    table.add_column("Services")
    table.add_column("Routes", style="dim")
    table.add_column("Description")

    for name, profile in builtin_profiles().items():
        label = f"{name} (default)" if name == DEFAULT_PROFILE else name
        table.add_row(
            label,
            ", ".join(s.name for s in profile.services),
            " ".join(r.path for r in profile.routes),
            profile.description,
        )
    console.print(table)


def register_stack_commands(app: typer.Typer, shared_console: Console):
    """Register stack lifecycle commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(up)
    app.command()(down)
    app.command()(status)
    app.command()(profiles)
