#!/usr/bin/env python3
"""envstack CLI - Provision a Debian host with a self-hosted dev stack."""

import typer
from rich.console import Console

from envstack.cli_deploy_commands import register_deploy_commands
from envstack.cli_stack_commands import register_stack_commands
from envstack.cli_utility_commands import register_utility_commands

app = typer.Typer(
    name="envstack",
    help="""envstack - Gitea, Kanboard and Nextcloud behind nginx on one Debian host

Installs Docker, writes docker-compose.yml + nginx.conf, starts the stack.

Quick start:
  sudo envstack preflight            # Check the host
  sudo envstack deploy               # Auto-detect the IP and deploy
  sudo envstack deploy --ip 10.0.0.5 # Deploy on a static IP
  envstack status                    # See what is running
""",
    add_completion=False,
)

console = Console()

# Attach modular subcommands
register_deploy_commands(app, console)
register_stack_commands(app, console)
register_utility_commands(app, console)


def main():
    app()


if __name__ == "__main__":
    main()
