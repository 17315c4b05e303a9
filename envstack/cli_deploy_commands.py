"""Deployment CLI commands - deploy, render."""
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from envstack.cli_support import (
    handle_cli_error,
    is_mock,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_file_logging,
)
from envstack.core.errors import EnvstackError
from envstack.discovery.network import AUTO, STATIC, AddressResolver
from envstack.services.stack.catalog import DEFAULT_PROFILE, builtin_profiles, get_profile

# Module-level console instance (will be set by register function)
console: Console = Console()


def _check_profile(profile: str) -> None:
    if profile not in builtin_profiles():
        print_error(console, f"Unknown profile '{profile}'")
        console.print(f"Available: {', '.join(sorted(builtin_profiles()))}")
        raise typer.Exit(1)


def deploy(
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Service set to deploy"),
    ip: Optional[str] = typer.Option(None, "--ip", help="Static IP address (skips auto-detection)"),
    static: bool = typer.Option(False, "--static", help="Prompt for a static IP address"),
    workdir: Optional[str] = typer.Option(None, "--workdir", "-w", help="Directory for the generated files"),
    project: Optional[str] = typer.Option(None, "--project", help="Docker Compose project name"),
    skip_install: bool = typer.Option(False, "--skip-install", help="Assume Docker is already installed"),
    strict_address: bool = typer.Option(False, "--strict-address", help="Reject addresses that are not IPv4"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Provision this host and launch the stack.

    Checks privileges and the OS, resolves the server address, installs
    Docker from the official repository, writes docker-compose.yml and
    nginx.conf, then runs `docker compose up -d`.

    Examples:
        sudo envstack deploy                      # Auto-detect the IP
        sudo envstack deploy --ip 192.0.2.10      # Use a static IP
        sudo envstack deploy --static             # Prompt for the IP
        sudo envstack deploy -p project           # Include OpenProject
    """
    from envstack.core.pipeline import PipelineOptions, ProvisionPipeline
    from envstack.core.runner import CommandRunner

    _check_profile(profile)
    setup_file_logging(log_file, verbose)

    options = PipelineOptions(
        profile=profile,
        strategy=STATIC if static else AUTO,
        static_address=ip,
        strict_address=strict_address,
        workdir=workdir,
        project_name=project,
        skip_install=skip_install,
    )
    pipeline = ProvisionPipeline(options, runner=CommandRunner(mock=is_mock()))

    try:
        result = pipeline.run()
    except (EnvstackError, OSError) as e:
        handle_cli_error(e, console, verbose)

    console.print()
    print_success(console, "Deployment complete!")
    console.print("[cyan]Services are available at:[/cyan]")
    for title, url in result.urls.items():
        console.print(f"  • {escape(title + ':'):13} {escape(url)}", highlight=False)
    console.print()
    print_info(console, f"Persistent data is stored in '{result.stack.workdir}'")
    if result.docker_user:
        print_warning(
            console,
            f"Log out and back in as '{result.docker_user}' to use 'docker' without 'sudo'.",
        )


def render(
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Service set to render"),
    ip: Optional[str] = typer.Option(None, "--ip", help="Static IP address (skips auto-detection)"),
    static: bool = typer.Option(False, "--static", help="Prompt for a static IP address"),
    workdir: Optional[str] = typer.Option(None, "--workdir", "-w", help="Directory for the generated files"),
    secret: Optional[str] = typer.Option(None, "--secret", help="Secret key for services that need one"),
    strict_address: bool = typer.Option(False, "--strict-address", help="Reject addresses that are not IPv4"),
):
    """Write docker-compose.yml and nginx.conf without installing or launching.

    Examples:
        envstack render --ip 192.0.2.10
        envstack render -p project -w /srv/stack
    """
    from envstack.core.config import get_config
    from envstack.services.stack.materializer import StackMaterializer

    _check_profile(profile)
    stack_profile = get_profile(profile)

    try:
        address = AddressResolver().resolve(
            strategy=STATIC if static else AUTO,
            static_address=ip,
            strict=strict_address,
        )
        materializer = StackMaterializer(workdir or get_config().workdir)
        context = materializer.context_for(stack_profile, address.address, secret)
        stack = materializer.materialize(stack_profile, context)
    except (EnvstackError, OSError) as e:
        handle_cli_error(e, console)

    print_success(console, f"Wrote {stack.compose_file}")
    print_success(console, f"Wrote {stack.proxy_file}")
    console.print("\n[dim]Start the stack with 'envstack up'[/dim]")


def register_deploy_commands(app: typer.Typer, shared_console: Console):
    """Register deployment commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(deploy)
    app.command()(render)
