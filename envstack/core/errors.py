"""Exceptions raised by the provisioning pipeline."""
from typing import Optional, Sequence


class EnvstackError(Exception):
    """Base error; the CLI exits with ``exit_code``."""

    exit_code = 1


class PreflightError(EnvstackError):
    """Raised when the host is not fit to be provisioned."""
    pass


class AddressResolutionError(EnvstackError):
    """Raised when no usable address could be resolved."""
    pass


class CommandError(EnvstackError):
    """Raised when an external command exits non-zero."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: Optional[str] = None):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Command failed with exit code {returncode}: {' '.join(self.command)}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        # Killed by a signal: report it the way a shell does
        if self.returncode < 0:
            return 128 + abs(self.returncode)
        return self.returncode or 1
