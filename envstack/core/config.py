"""envstack runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional

DOCKER_REPO_URL = "https://download.docker.com/linux/debian"


@dataclass
class EnvstackConfig:
    """Runtime configuration for envstack runs.

    Attributes:
        workdir: Directory receiving docker-compose.yml and nginx.conf (default: environment)
        project_name: Docker Compose project name (default: compose picks the directory name)
        docker_repo_url: Base URL of the Docker apt repository
        keyring_path: Where the Docker signing key is stored
        sources_list_path: Where the Docker apt source entry is written
        os_release_path: OS identity file inspected by the preflight checks
        command_timeout: Timeout in seconds for each external command (default: none)
    """

    workdir: str = "environment"
    project_name: Optional[str] = None

    # Docker apt repository
    docker_repo_url: str = DOCKER_REPO_URL
    keyring_path: str = "/etc/apt/keyrings/docker.asc"
    sources_list_path: str = "/etc/apt/sources.list.d/docker.list"

    os_release_path: str = "/etc/os-release"

    command_timeout: Optional[int] = None

    @property
    def gpg_key_url(self) -> str:
        return f"{self.docker_repo_url}/gpg"

    @classmethod
    def from_env(cls) -> "EnvstackConfig":
        """Create config from environment variables.

        Environment variables:
            ENVSTACK_WORKDIR: Output directory for generated files
            ENVSTACK_PROJECT: Docker Compose project name
            ENVSTACK_DOCKER_REPO: Docker apt repository base URL
            ENVSTACK_KEYRING: Signing key destination
            ENVSTACK_SOURCES_LIST: apt source entry destination
            ENVSTACK_OS_RELEASE: OS identity file
            ENVSTACK_COMMAND_TIMEOUT: Per-command timeout in seconds

        Returns:
            EnvstackConfig instance with values from environment or defaults
        """
        timeout = os.getenv("ENVSTACK_COMMAND_TIMEOUT")
        return cls(
            workdir=os.getenv("ENVSTACK_WORKDIR", cls.workdir),
            project_name=os.getenv("ENVSTACK_PROJECT") or None,
            docker_repo_url=os.getenv("ENVSTACK_DOCKER_REPO", cls.docker_repo_url).rstrip("/"),
            keyring_path=os.getenv("ENVSTACK_KEYRING", cls.keyring_path),
            sources_list_path=os.getenv("ENVSTACK_SOURCES_LIST", cls.sources_list_path),
            os_release_path=os.getenv("ENVSTACK_OS_RELEASE", cls.os_release_path),
            command_timeout=int(timeout) if timeout else None,
        )


# Global config instance (can be overridden)
_config: Optional[EnvstackConfig] = None


def get_config() -> EnvstackConfig:
    """Get the global envstack configuration.

    Returns:
        EnvstackConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = EnvstackConfig.from_env()
    return _config


def set_config(config: Optional[EnvstackConfig]):
    """Set the global envstack configuration.

    Args:
        config: EnvstackConfig instance to use globally, or None to re-read the environment
    """
    global _config
    _config = config
