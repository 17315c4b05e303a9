"""Subprocess wrapper used for every external command envstack runs."""
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from envstack.core.config import get_config
from envstack.core.errors import CommandError
from envstack.core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class CommandRunner:
    """Runs commands synchronously and raises on the first failure.

    In mock mode commands are logged and recorded in ``history`` but never
    executed; they report success with empty output.
    """
    mock: bool = False
    timeout: Optional[int] = None
    history: List[List[str]] = field(default_factory=list)

    def __post_init__(self):
        if self.timeout is None:
            self.timeout = get_config().command_timeout

    def run(
        self,
        command: Sequence[str],
        capture: bool = False,
        check: bool = True,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandResult:
        """Run a command.

        Args:
            command: Argument vector, never passed through a shell
            capture: Capture stdout/stderr instead of streaming to the terminal
            check: Raise CommandError on non-zero exit
            cwd: Working directory for the command

        Returns:
            CommandResult with exit status and captured output

        Raises:
            CommandError: If the command fails and check is True
        """
        argv = [str(part) for part in command]
        self.history.append(argv)

        if self.mock:
            logger.info(f"MOCK: Would run: {' '.join(argv)}")
            return CommandResult(command=argv, returncode=0)

        logger.debug(f"Running: {' '.join(argv)}")
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                capture_output=capture,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise CommandError(argv, 127, f"{argv[0]}: command not found")
        except subprocess.TimeoutExpired:
            raise CommandError(argv, 124, f"timed out after {self.timeout}s")

        result = CommandResult(
            command=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise CommandError(argv, result.returncode, result.stderr)
        return result

    def output(self, command: Sequence[str], check: bool = True) -> str:
        """Run a command and return its captured stdout."""
        return self.run(command, capture=True, check=check).stdout
