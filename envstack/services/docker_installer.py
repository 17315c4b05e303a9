"""Docker Engine installation on the host via the official apt repository.

Mirrors the documented manual procedure:
- refresh the package index and install prerequisites
- trust Docker's signing key and register its repository
- install the engine with the buildx and compose plugins
- add the invoking sudo user to the docker group
"""
import os
from pathlib import Path
from typing import Optional

from envstack.core.config import EnvstackConfig, get_config
from envstack.core.errors import CommandError
from envstack.core.logger import get_logger
from envstack.core.runner import CommandRunner

logger = get_logger(__name__)

PREREQUISITES = ['ca-certificates', 'curl', 'git']

DOCKER_PACKAGES = [
    'docker-ce',
    'docker-ce-cli',
    'containerd.io',
    'docker-buildx-plugin',
    'docker-compose-plugin',
]

DOCKER_GROUP = 'docker'


def render_repository_line(arch: str, codename: str, keyring_path: str, repo_url: str) -> str:
    """Build the apt source entry for the Docker repository."""
    return f"deb [arch={arch} signed-by={keyring_path}] {repo_url} {codename} stable\n"


class DockerInstaller:
    """Installs Docker Engine and grants the invoking user access to it."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        config: Optional[EnvstackConfig] = None,
    ):
        self.runner = runner or CommandRunner()
        self.config = config or get_config()

    @property
    def mock(self) -> bool:
        return self.runner.mock

    def install_prerequisites(self) -> None:
        logger.info("Updating package lists...")
        self._apt('update')
        logger.info("Installing required dependencies...")
        self._apt('install', '-y', *PREREQUISITES)

    def register_repository(self, codename: str) -> None:
        """Trust Docker's signing key and add its apt repository."""
        keyring = Path(self.config.keyring_path)

        logger.info("Creating apt keyrings directory...")
        self.runner.run(['install', '-m', '0755', '-d', str(keyring.parent)])

        logger.info("Downloading Docker's GPG key...")
        self.runner.run(['curl', '-fsSL', self.config.gpg_key_url, '-o', str(keyring)])
        self.runner.run(['chmod', 'a+r', str(keyring)])

        logger.info("Adding the Docker repository...")
        line = render_repository_line(
            arch=self.architecture(),
            codename=codename,
            keyring_path=str(keyring),
            repo_url=self.config.docker_repo_url,
        )
        self._write_sources_list(line)

    def install_runtime(self) -> None:
        logger.info("Updating package lists with the new repository...")
        self._apt('update')
        logger.info("Installing Docker Engine and its components...")
        self._apt('install', '-y', *DOCKER_PACKAGES)
        logger.info("Docker has been installed successfully.")

    def grant_permissions(self, user: Optional[str] = None) -> Optional[str]:
        """Add the invoking sudo user to the docker group.

        Best-effort: when no invoking user can be determined a warning is
        logged and nothing is changed.

        Returns:
            The user that was added, or None
        """
        user = user if user is not None else os.environ.get('SUDO_USER', '')
        if not user or user == 'root':
            logger.warning(
                "Could not detect the user that invoked sudo. "
                "Skip this step if you are running as root directly."
            )
            return None

        logger.info(f"Adding user '{user}' to the '{DOCKER_GROUP}' group...")
        self.runner.run(['usermod', '-aG', DOCKER_GROUP, user])
        logger.warning(
            f"User '{user}' must log out and back in to use Docker without sudo."
        )
        return user

    def architecture(self) -> str:
        arch = self.runner.output(['dpkg', '--print-architecture']).strip()
        if arch:
            return arch
        if self.mock:
            return 'amd64'
        raise CommandError(['dpkg', '--print-architecture'], 1, "could not determine the package architecture")

    def _apt(self, *args: str) -> None:
        self.runner.run(['apt-get', *args])

    def _write_sources_list(self, line: str) -> None:
        target = Path(self.config.sources_list_path)
        if self.mock:
            logger.info(f"MOCK: Would write {target}: {line.strip()}")
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(line)
