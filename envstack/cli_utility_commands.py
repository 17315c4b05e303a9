"""Utility CLI commands - preflight, detect-ip, version."""
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from envstack import __version__
from envstack.cli_support import handle_cli_error, is_mock, print_success
from envstack.core.errors import EnvstackError
from envstack.core.preflight import PreflightChecker
from envstack.discovery.network import AddressResolver

# Module-level console instance (will be set by register function)
console: Console = Console()


def preflight():
    """Check that this host can be provisioned.

    Verifies root privileges and a supported Debian release without
    changing anything.
    """
    checker = PreflightChecker(skip_privileges=is_mock())
    try:
        release = checker.run()
    except EnvstackError as e:
        handle_cli_error(e, console)

    console.print(Panel(
        f"[bold]OS:[/bold] {escape(release.pretty_name or release.id)}\n"
        f"[bold]Version:[/bold] {escape(release.version_id)} ({escape(release.version_codename)})",
        title="Host",
        border_style="blue",
    ))
    print_success(console, "Host is ready to be provisioned")


def detect_ip(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print only the address"),
):
    """Show the address auto-detection would use."""
    try:
        resolved = AddressResolver().detect()
    except EnvstackError as e:
        handle_cli_error(e, console)

    if quiet:
        typer.echo(resolved.address)
        return
    print_success(console, f"{resolved.address} (interface: {resolved.interface})")


def version():
    """Show envstack version."""
    console.print(f"envstack v{__version__}")


def register_utility_commands(app: typer.Typer, shared_console: Console):
    """Register utility commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(preflight)
    app.command("detect-ip")(detect_ip)
    app.command()(version)
