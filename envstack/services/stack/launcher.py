"""Drive `docker compose` for a materialized stack."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from envstack.core.errors import CommandError
from envstack.core.logger import get_logger
from envstack.core.runner import CommandRunner
from envstack.services.stack.renderer import COMPOSE_FILE

logger = get_logger(__name__)


class ComposeLauncher:
    """Runs docker compose against the files in a working directory.

    ``up`` starts the services detached and returns as soon as the command
    does; service readiness is not checked.
    """

    def __init__(
        self,
        workdir: Union[str, Path],
        runner: Optional[CommandRunner] = None,
        project_name: Optional[str] = None,
    ):
        self.workdir = Path(workdir)
        self.runner = runner or CommandRunner()
        self.project_name = project_name

    def up(self) -> None:
        logger.info("Starting the containers with Docker Compose... (this may take a few minutes)")
        self._compose('up', '-d')

    def down(self) -> None:
        logger.info("Stopping the containers...")
        self._compose('down')

    def status(self) -> List[Dict[str, Any]]:
        """Services reported by `docker compose ps`, one dict per container."""
        result = self._compose('ps', '--format', 'json', capture=True)
        return parse_ps_output(result.stdout)

    def _compose(self, *args: str, capture: bool = False):
        if not self.runner.mock and not (self.workdir / COMPOSE_FILE).is_file():
            raise CommandError(
                ['docker', 'compose', *args], 1,
                f"No {COMPOSE_FILE} in '{self.workdir}'. Run 'envstack render' first.",
            )
        command = ['docker', 'compose']
        if self.project_name:
            command += ['-p', self.project_name]
        command += list(args)
        return self.runner.run(command, capture=capture, cwd=self.workdir)


def parse_ps_output(output: str) -> List[Dict[str, Any]]:
    """Parse `docker compose ps --format json` output.

    Newer Compose releases print one JSON object per line, older ones a
    single JSON array.
    """
    output = output.strip()
    if not output:
        return []
    if output.startswith('['):
        return json.loads(output)
    return [json.loads(line) for line in output.splitlines() if line.strip()]
