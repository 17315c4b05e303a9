"""Write the generated stack files into the working directory."""
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from envstack.core.logger import get_logger
from envstack.services.stack.models import StackContext, StackProfile
from envstack.services.stack.renderer import (
    COMPOSE_FILE,
    PROXY_FILE,
    render_compose,
    render_proxy_config,
)

logger = get_logger(__name__)


def generate_secret(nbytes: int = 32) -> str:
    """Random hex token for services that need a secret key."""
    return secrets.token_hex(nbytes)


@dataclass
class MaterializedStack:
    """Paths of the files written for one stack."""
    workdir: Path
    compose_file: Path
    proxy_file: Path


class StackMaterializer:
    """Renders a profile and writes docker-compose.yml and nginx.conf.

    Existing files are overwritten, so rerunning with the same context
    yields identical files.
    """

    def __init__(self, workdir: Union[str, Path]):
        self.workdir = Path(workdir)

    def context_for(
        self,
        profile: StackProfile,
        address: str,
        secret: Optional[str] = None,
    ) -> StackContext:
        """Build the render context, generating a secret when the profile needs one."""
        if profile.needs_secret and not secret:
            secret = generate_secret()
        return StackContext(address=address, secret=secret)

    def materialize(self, profile: StackProfile, context: StackContext) -> MaterializedStack:
        logger.info(f"Creating '{self.workdir}' and the configuration files...")
        self.workdir.mkdir(parents=True, exist_ok=True)

        compose_file = self.workdir / COMPOSE_FILE
        proxy_file = self.workdir / PROXY_FILE
        compose_file.write_text(render_compose(profile, context))
        proxy_file.write_text(render_proxy_config(profile, context))

        logger.info(f"Wrote {COMPOSE_FILE} and {PROXY_FILE} in '{self.workdir}'")
        return MaterializedStack(
            workdir=self.workdir,
            compose_file=compose_file,
            proxy_file=proxy_file,
        )
